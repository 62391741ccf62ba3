"""Balances router: net balances and suggested settlements for a group."""

import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user, get_group_repository
from repositories.base import GroupRepository
from utils.balances import compute_balances
from utils.debts import settle_group
from utils.display import get_member_info
from utils.engine import EngineError, round_amount
from utils.validation import get_group_or_404, verify_group_membership


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups/{group_id}", tags=["balances"])


def load_snapshot(repository: GroupRepository, group_id: int):
    members, expenses = repository.get_snapshot(group_id)
    return {m.id: m for m in members}, expenses


@router.get("/balances", response_model=list[schemas.MemberNetBalance])
def get_group_balances(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    repository: GroupRepository = Depends(get_group_repository)
):
    get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    members, expenses = load_snapshot(repository, group_id)
    try:
        net_balance = compute_balances(members.values(), expenses)
    except EngineError as e:
        logger.warning(f"Cannot compute balances for group {group_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return [
        schemas.MemberNetBalance(
            user=get_member_info(members[member_id]),
            amount=round_amount(amount)
        )
        for member_id, amount in net_balance.items()
    ]


@router.get("/settlements", response_model=schemas.GroupSettlementSummary)
def get_group_settlements(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    repository: GroupRepository = Depends(get_group_repository)
):
    """Suggest the transfers that settle every debt in the group."""
    group = get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    members, expenses = load_snapshot(repository, group_id)
    try:
        result = settle_group(members.values(), expenses)
    except EngineError as e:
        logger.warning(f"Cannot settle group {group_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return schemas.GroupSettlementSummary(
        total_expenses=len(expenses),
        total_amount=sum(e.amount for e in expenses),
        currency=group.currency,
        member_count=len(members),
        settlements=[
            schemas.SuggestedSettlement(
                from_user=get_member_info(members[t.from_id]),
                to_user=get_member_info(members[t.to_id]),
                amount=t.amount
            )
            for t in result.settlements
        ],
        member_balances=[
            schemas.MemberBalanceSummary(
                user=get_member_info(members[b.member_id]),
                total_owed=b.total_owed,
                total_to_receive=b.total_to_receive,
                net_balance=b.net_balance
            )
            for b in result.member_balances
        ]
    )
