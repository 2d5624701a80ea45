"""Participation gate arithmetic."""


def required_moderations(pending_evidence: int) -> int:
    """Users must help clear the backlog before submitting: 1 pending needs 1 review, 2+ need 2."""
    if pending_evidence >= 2:
        return 2
    if pending_evidence == 1:
        return 1
    return 0


def is_allowed(user_moderations: int, pending_evidence: int, authenticated: bool = True) -> bool:
    if not authenticated:
        return False
    return user_moderations >= required_moderations(pending_evidence)
