"""Database models."""

from rotten.models.user import Moderator, User
from rotten.models.evidence import Evidence
from rotten.models.moderation import ModerationAction
from rotten.models.company_request import CompanyRequest
from rotten.models.entity import ENTITY_MODELS, Company, Leader, Manager
from rotten.models.notification import NotificationJob

__all__ = [
    "User",
    "Moderator",
    "Evidence",
    "ModerationAction",
    "CompanyRequest",
    "Company",
    "Leader",
    "Manager",
    "ENTITY_MODELS",
    "NotificationJob",
]
