"""Scored entities - companies, leaders, managers."""

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rotten.database import Base, utcnow


class EntityMixin:
    """Columns shared by every scored entity. rotten_score is derived, never user-written."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    rotten_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Company(EntityMixin, Base):
    __tablename__ = "companies"

    country: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    employees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    annual_revenue: Mapped[float | None] = mapped_column(Numeric(20, 2, asdecimal=False), nullable=True)
    ownership_type: Mapped[str] = mapped_column(
        String(32), nullable=False, default="independent"
    )
    country_region: Mapped[str] = mapped_column(
        String(32), nullable=False, default="non_western"
    )  # global|western|non_western


class Leader(EntityMixin, Base):
    __tablename__ = "leaders"

    role: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_id: Mapped[int | None] = mapped_column(ForeignKey("companies.id"), nullable=True)


class Manager(EntityMixin, Base):
    __tablename__ = "managers"

    role: Mapped[str | None] = mapped_column(Text, nullable=True)
    company_id: Mapped[int | None] = mapped_column(ForeignKey("companies.id"), nullable=True)


ENTITY_MODELS: dict[str, type[EntityMixin]] = {
    "company": Company,
    "leader": Leader,
    "manager": Manager,
}
