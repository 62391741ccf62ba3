"""Expenses router: create, read, update, delete group expenses."""

from datetime import date
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import models
import schemas
from database import get_db
from dependencies import get_current_user
from utils.engine import SPLIT_CUSTOM, to_decimal
from utils.validation import get_group_or_404, verify_group_membership, validate_expense_request


router = APIRouter(tags=["expenses"])


def normalize_date(date_str: str) -> str:
    """Normalize date string to YYYY-MM-DD format for consistent sorting."""
    if not date_str:
        return date.today().isoformat()
    # Handle ISO format with time component (e.g., 2025-12-27T00:00:00.000Z)
    if 'T' in date_str:
        return date_str.split('T')[0]
    return date_str


def build_splits(expense_id: int, expense: schemas.ExpenseCreate) -> list[models.ExpenseSplit]:
    if expense.split_type == SPLIT_CUSTOM:
        return [
            models.ExpenseSplit(expense_id=expense_id, user_id=s.user_id, amount=to_decimal(s.amount))
            for s in expense.custom_splits
        ]
    return [
        models.ExpenseSplit(expense_id=expense_id, user_id=user_id, amount=None)
        for user_id in expense.split_between
    ]


def to_expense_schema(expense: models.Expense, splits: list[models.ExpenseSplit]) -> schemas.Expense:
    split_between = [s.user_id for s in splits]
    custom_splits = []
    if expense.split_type == SPLIT_CUSTOM:
        custom_splits = [schemas.CustomSplit(user_id=s.user_id, amount=s.amount) for s in splits]

    return schemas.Expense(
        id=expense.id,
        group_id=expense.group_id,
        description=expense.description,
        amount=expense.amount,
        payer_id=expense.payer_id,
        split_type=expense.split_type,
        split_between=split_between,
        custom_splits=custom_splits,
        category=expense.category,
        date=expense.date,
        notes=expense.notes,
        created_by_id=expense.created_by_id
    )


def get_expense_or_404(db: Session, expense_id: int) -> models.Expense:
    expense = db.query(models.Expense).join(
        models.Group, models.Group.id == models.Expense.group_id
    ).filter(
        models.Expense.id == expense_id,
        models.Group.is_active == True
    ).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


def get_splits(db: Session, expense_id: int) -> list[models.ExpenseSplit]:
    return db.query(models.ExpenseSplit).filter(
        models.ExpenseSplit.expense_id == expense_id
    ).order_by(models.ExpenseSplit.id).all()


@router.post("/groups/{group_id}/expenses", response_model=schemas.Expense, status_code=201)
def create_expense(
    group_id: int,
    expense: schemas.ExpenseCreate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)
    validate_expense_request(db, group_id, expense)

    db_expense = models.Expense(
        group_id=group_id,
        description=expense.description,
        amount=to_decimal(expense.amount),
        payer_id=expense.payer_id,
        split_type=expense.split_type,
        category=expense.category,
        date=normalize_date(expense.date),
        notes=expense.notes,
        created_by_id=current_user.id
    )
    db.add(db_expense)
    db.flush()  # generates db_expense.id

    splits = build_splits(db_expense.id, expense)
    db.add_all(splits)
    db.commit()
    db.refresh(db_expense)

    return to_expense_schema(db_expense, splits)


@router.get("/groups/{group_id}/expenses", response_model=list[schemas.Expense])
def read_group_expenses(
    group_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    get_group_or_404(db, group_id)
    verify_group_membership(db, group_id, current_user.id)

    expenses = db.query(models.Expense).filter(
        models.Expense.group_id == group_id
    ).order_by(models.Expense.date.desc(), models.Expense.id.desc()).all()

    if not expenses:
        return []

    # Fetch all splits in one query
    splits_by_expense = {e.id: [] for e in expenses}
    splits = db.query(models.ExpenseSplit).filter(
        models.ExpenseSplit.expense_id.in_(splits_by_expense.keys())
    ).order_by(models.ExpenseSplit.id).all()
    for split in splits:
        splits_by_expense[split.expense_id].append(split)

    return [to_expense_schema(e, splits_by_expense[e.id]) for e in expenses]


@router.get("/expenses/{expense_id}", response_model=schemas.Expense)
def get_expense(
    expense_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    verify_group_membership(db, expense.group_id, current_user.id)
    return to_expense_schema(expense, get_splits(db, expense_id))


@router.put("/expenses/{expense_id}", response_model=schemas.Expense)
def update_expense(
    expense_id: int,
    expense_update: schemas.ExpenseUpdate,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    verify_group_membership(db, expense.group_id, current_user.id)

    if expense.created_by_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the expense creator can update it")

    validate_expense_request(db, expense.group_id, expense_update)

    expense.description = expense_update.description
    expense.amount = to_decimal(expense_update.amount)
    expense.payer_id = expense_update.payer_id
    expense.split_type = expense_update.split_type
    expense.category = expense_update.category
    expense.date = normalize_date(expense_update.date) if expense_update.date else expense.date
    expense.notes = expense_update.notes

    # Replace splits
    db.query(models.ExpenseSplit).filter(models.ExpenseSplit.expense_id == expense_id).delete()
    splits = build_splits(expense_id, expense_update)
    db.add_all(splits)

    db.commit()
    db.refresh(expense)
    return to_expense_schema(expense, splits)


@router.delete("/expenses/{expense_id}")
def delete_expense(
    expense_id: int,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    expense = get_expense_or_404(db, expense_id)
    verify_group_membership(db, expense.group_id, current_user.id)

    if expense.created_by_id != current_user.id:
        raise HTTPException(status_code=403, detail="Only the expense creator can delete it")

    db.query(models.ExpenseSplit).filter(models.ExpenseSplit.expense_id == expense_id).delete()
    db.delete(expense)
    db.commit()

    return {"message": "Expense deleted successfully"}
