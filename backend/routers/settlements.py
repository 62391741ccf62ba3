"""Settlements router: record confirmed payments and browse the ledger."""

import math
from datetime import datetime, timezone
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.engine import to_decimal
from utils.validation import get_group_or_404, verify_group_membership, get_group_member_ids


router = APIRouter(prefix="/groups/{group_id}/settlements", tags=["settlements"])


@router.post("", response_model=schemas.Settlement, status_code=201)
def record_settlement(
    group_id: int,
    settlement: schemas.SettlementCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    group = get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    if settlement.from_id == settlement.to_id:
        raise HTTPException(status_code=400, detail="Cannot record a payment to yourself")

    member_ids = get_group_member_ids(db, group_id)
    if settlement.from_id not in member_ids or settlement.to_id not in member_ids:
        raise HTTPException(status_code=400, detail="Invalid users specified")

    db_settlement = models.Settlement(
        group_id=group_id,
        from_id=settlement.from_id,
        to_id=settlement.to_id,
        amount=to_decimal(settlement.amount),
        currency=group.currency,
        status="settled",
        settled_at=datetime.now(timezone.utc),
        settled_by_id=current_user.id,
        notes=settlement.notes
    )
    db.add(db_settlement)
    db.commit()
    db.refresh(db_settlement)
    return db_settlement


@router.get("/history", response_model=schemas.SettlementHistory)
def get_settlement_history(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100)
):
    get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    query = db.query(models.Settlement).filter(models.Settlement.group_id == group_id)
    total = query.count()
    settlements = query.order_by(
        models.Settlement.settled_at.desc(), models.Settlement.id.desc()
    ).offset((page - 1) * limit).limit(limit).all()

    return schemas.SettlementHistory(
        settlements=[schemas.Settlement.model_validate(s) for s in settlements],
        pagination=schemas.Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit)
        )
    )
