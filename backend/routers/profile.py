"""Profile management router: update profile, delete account."""

import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.rate_limiter import profile_update_rate_limiter


logger = logging.getLogger(__name__)

router = APIRouter(tags=["profile"])


@router.put("/users/me/profile", dependencies=[Depends(profile_update_rate_limiter)])
def update_profile(
    profile_data: schemas.ProfileUpdateRequest,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    """Update display name and photo. Fields left out of the request are unchanged."""
    updated_fields = []

    if profile_data.full_name is not None:
        current_user.full_name = profile_data.full_name
        updated_fields.append("full_name")

    if profile_data.photo_url is not None:
        current_user.photo_url = profile_data.photo_url
        updated_fields.append("photo_url")

    db.commit()

    return {
        "message": "Profile updated successfully",
        "updated_fields": updated_fields
    }


@router.delete("/users/me/account", dependencies=[Depends(profile_update_rate_limiter)])
def delete_account(
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    """
    Deactivate the current user's account.

    Refused while the user pays for or shares an expense in an active group,
    or owns an active group that still has other members. Otherwise groups
    the user owns alone are soft deleted, memberships are removed, and the
    email is released so it can be registered again. Rows that reference the
    user in deleted groups and in the settlement ledger are kept.
    """
    involved = db.query(models.Expense.id).join(
        models.Group, models.Group.id == models.Expense.group_id
    ).outerjoin(
        models.ExpenseSplit, models.ExpenseSplit.expense_id == models.Expense.id
    ).filter(
        models.Group.is_active == True,
        (models.Expense.payer_id == current_user.id) | (models.ExpenseSplit.user_id == current_user.id)
    ).first()
    if involved:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account has expenses in active groups and cannot be deleted"
        )

    owned_groups = db.query(models.Group).filter(
        models.Group.created_by_id == current_user.id,
        models.Group.is_active == True
    ).all()
    for group in owned_groups:
        others = db.query(models.GroupMember).filter(
            models.GroupMember.group_id == group.id,
            models.GroupMember.user_id != current_user.id
        ).count()
        if others:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Group '{group.name}' still has other members. Delete it before deleting your account"
            )

    for group in owned_groups:
        group.is_active = False

    db.query(models.GroupMember).filter(
        models.GroupMember.user_id == current_user.id
    ).delete()

    current_user.is_active = False
    current_user.email = f"deleted-{current_user.id}@deleted.invalid"
    db.commit()

    logger.info(f"Deactivated account {current_user.id}")
    return {"message": "Account deleted successfully"}
