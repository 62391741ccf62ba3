"""
Display utilities for member names
"""
import models
import schemas
from utils.engine import Member


def get_user_display_name(user: models.User) -> str:
    """Use full_name if available, otherwise the email."""
    if not user:
        return "Unknown User"
    return user.full_name or user.email


def get_member_info(member: Member) -> schemas.MemberInfo:
    """
    Build display info for an engine member.

    Args:
        member: Member as supplied by a group repository

    Returns:
        MemberInfo with the member's name, falling back to email, then ID.
    """
    return schemas.MemberInfo(
        id=member.id,
        full_name=member.name or member.email or f"User {member.id}",
        email=member.email or ""
    )
