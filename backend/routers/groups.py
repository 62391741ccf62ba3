"""Groups router: create, read, update, delete groups."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.display import get_user_display_name
from utils.validation import get_group_or_404, verify_group_membership, verify_group_ownership


router = APIRouter(prefix="/groups", tags=["groups"])


@router.post("", response_model=schemas.Group)
def create_group(
    group: schemas.GroupCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    db_group = models.Group(
        name=group.name,
        description=group.description,
        currency=group.currency,
        created_by_id=current_user.id
    )
    db.add(db_group)
    db.commit()
    db.refresh(db_group)

    # Add creator as member
    db_member = models.GroupMember(group_id=db_group.id, user_id=current_user.id)
    db.add(db_member)
    db.commit()

    return db_group


@router.get("", response_model=list[schemas.Group])
def read_groups(
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    # Get active groups where user is a member
    return db.query(models.Group).join(
        models.GroupMember,
        models.Group.id == models.GroupMember.group_id
    ).filter(
        models.GroupMember.user_id == current_user.id,
        models.Group.is_active == True
    ).order_by(models.Group.id).all()


@router.get("/{group_id}", response_model=schemas.GroupWithMembers)
def get_group(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    members_query = db.query(models.GroupMember, models.User).join(
        models.User, models.GroupMember.user_id == models.User.id
    ).filter(models.GroupMember.group_id == group_id).order_by(models.GroupMember.id).all()

    members = [
        schemas.GroupMember(
            id=gm.id,
            user_id=user.id,
            full_name=get_user_display_name(user),
            email=user.email
        )
        for gm, user in members_query
    ]

    return schemas.GroupWithMembers(
        id=group.id,
        name=group.name,
        description=group.description or "",
        currency=group.currency,
        created_by_id=group.created_by_id,
        members=members
    )


@router.put("/{group_id}", response_model=schemas.Group)
def update_group(
    group_id: int,
    group_update: schemas.GroupUpdate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = verify_group_ownership(db, group_id, current_user.id)
    group.name = group_update.name
    group.description = group_update.description
    group.currency = group_update.currency
    db.commit()
    db.refresh(group)
    return group


@router.delete("/{group_id}")
def delete_group(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = verify_group_ownership(db, group_id, current_user.id)

    # Soft delete keeps expenses and the settlement ledger intact
    group.is_active = False
    db.commit()

    return {"message": "Group deleted successfully"}
