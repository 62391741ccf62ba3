"""Members router: add and remove group members."""

from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.display import get_user_display_name
from utils.validation import get_group_or_404, verify_group_membership, get_user_by_email


router = APIRouter(prefix="/groups/{group_id}", tags=["members"])


@router.post("/members", response_model=schemas.GroupMember)
def add_group_member(
    group_id: int,
    member_add: schemas.GroupMemberAdd,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    user = get_user_by_email(db, member_add.email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    existing = db.query(models.GroupMember).filter(
        models.GroupMember.group_id == group_id,
        models.GroupMember.user_id == user.id
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="User is already a member of this group")

    new_member = models.GroupMember(group_id=group_id, user_id=user.id)
    db.add(new_member)
    db.commit()
    db.refresh(new_member)

    return schemas.GroupMember(
        id=new_member.id,
        user_id=user.id,
        full_name=get_user_display_name(user),
        email=user.email
    )


@router.delete("/members/{user_id}")
def remove_group_member(
    group_id: int,
    user_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    # Owner can remove anyone except themselves
    # Non-owners can only remove themselves
    if current_user.id != group.created_by_id and current_user.id != user_id:
        raise HTTPException(status_code=403, detail="You can only remove yourself from the group")

    if user_id == group.created_by_id:
        raise HTTPException(status_code=400, detail="Group owner cannot be removed. Delete the group instead.")

    member = db.query(models.GroupMember).filter(
        models.GroupMember.group_id == group_id,
        models.GroupMember.user_id == user_id
    ).first()

    if not member:
        raise HTTPException(status_code=404, detail="Member not found in this group")

    # Balances are computed over every member that appears in an expense
    involved = db.query(models.Expense.id).outerjoin(
        models.ExpenseSplit, models.ExpenseSplit.expense_id == models.Expense.id
    ).filter(
        models.Expense.group_id == group_id,
        (models.Expense.payer_id == user_id) | (models.ExpenseSplit.user_id == user_id)
    ).first()
    if involved:
        raise HTTPException(status_code=400, detail="Member has expenses in this group and cannot be removed")

    db.delete(member)
    db.commit()

    return {"message": "Member removed successfully"}
