"""Decision email templates."""

SIGNATURE = "- Rotten Company"


def evidence_approved(title: str | None, note: str | None) -> tuple[str, str]:
    lines = [
        "Hi,",
        "",
        f'Your evidence "{title or "(untitled)"}" has been approved by our moderators '
        "and is now live on Rotten Company.",
    ]
    if note:
        lines += ["", f'Moderator note: "{note}"']
    lines += ["", SIGNATURE]
    return "Your evidence was approved on Rotten Company", "\n".join(lines)


def evidence_rejected(title: str | None, note: str) -> tuple[str, str]:
    body = "\n".join(
        [
            "Hi,",
            "",
            f'Your evidence "{title or "(untitled)"}" was reviewed by our moderators '
            "but was not approved.",
            "",
            "Reason for rejection:",
            note,
            "",
            SIGNATURE,
        ]
    )
    return "Your evidence was rejected on Rotten Company", body


def company_request_approved(name: str, slug: str) -> tuple[str, str]:
    body = "\n".join(
        [
            "Hi,",
            "",
            f'Your request to add "{name}" was approved.',
            f"The company page is live at /company/{slug}.",
            "",
            SIGNATURE,
        ]
    )
    return "Your company request was approved", body


def company_request_rejected(name: str, note: str) -> tuple[str, str]:
    body = "\n".join(
        [
            "Hi,",
            "",
            f'Your request to add "{name}" was rejected.',
            "",
            "Reason:",
            note,
            "",
            SIGNATURE,
        ]
    )
    return "Your company request was rejected", body
