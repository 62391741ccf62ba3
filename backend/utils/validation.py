"""Validation utilities for group membership, access control, and expense participants."""

from sqlalchemy.orm import Session
from fastapi import HTTPException

import models
import schemas
from utils.balances import validate_expense
from utils.engine import SPLIT_CUSTOM, EngineError, Expense, SplitShare


def get_user_by_email(db: Session, email: str):
    """Get a user by their email address."""
    return db.query(models.User).filter(models.User.email == email).first()


def get_group_or_404(db: Session, group_id: int):
    """Get an active group by ID or raise 404 if not found."""
    group = db.query(models.Group).filter(
        models.Group.id == group_id,
        models.Group.is_active == True
    ).first()
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def verify_group_membership(db: Session, group_id: int, user_id: int):
    """Verify that a user is a member of a group, raise 403 if not."""
    member = db.query(models.GroupMember).filter(
        models.GroupMember.group_id == group_id,
        models.GroupMember.user_id == user_id
    ).first()
    if not member:
        raise HTTPException(status_code=403, detail="You are not a member of this group")
    return member


def verify_group_ownership(db: Session, group_id: int, user_id: int):
    """Verify that a user owns a group, raise 403 if not."""
    group = get_group_or_404(db, group_id)
    if group.created_by_id != user_id:
        raise HTTPException(status_code=403, detail="Only the group owner can perform this action")
    return group


def get_group_member_ids(db: Session, group_id: int) -> set[int]:
    rows = db.query(models.GroupMember.user_id).filter(
        models.GroupMember.group_id == group_id
    ).all()
    return {row[0] for row in rows}


def validate_expense_request(db: Session, group_id: int, expense: schemas.ExpenseCreate) -> None:
    """
    Reject an expense before it is stored, raise 400 if it is malformed.

    Checks that the payer and every participant belong to the group, that an
    equal split names at least one participant, and that custom split amounts
    add up to the expense amount within one cent.
    """
    if expense.split_type == SPLIT_CUSTOM:
        participant_ids = [s.user_id for s in expense.custom_splits]
    else:
        participant_ids = expense.split_between

    if len(participant_ids) != len(set(participant_ids)):
        raise HTTPException(status_code=400, detail="Duplicate participants found in splits")

    try:
        validate_expense(
            Expense(
                amount=expense.amount,
                payer_id=expense.payer_id,
                split_type=expense.split_type,
                participants=expense.split_between,
                custom_splits=[SplitShare(s.user_id, s.amount) for s in expense.custom_splits],
            ),
            get_group_member_ids(db, group_id)
        )
    except EngineError as e:
        raise HTTPException(status_code=400, detail=str(e))
