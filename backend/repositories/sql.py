"""Local database repository backed by SQLAlchemy."""

from collections import defaultdict
from sqlalchemy.orm import Session

import models
from repositories.base import GroupRepository
from utils.engine import SPLIT_CUSTOM, Expense, Member, SplitShare


class SQLGroupRepository(GroupRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_members(self, group_id: int) -> list[Member]:
        rows = self.db.query(models.GroupMember, models.User).join(
            models.User, models.GroupMember.user_id == models.User.id
        ).filter(
            models.GroupMember.group_id == group_id
        ).order_by(models.GroupMember.id).all()

        return [
            Member(id=user.id, name=user.full_name or user.email, email=user.email)
            for _, user in rows
        ]

    def get_expenses(self, group_id: int) -> list[Expense]:
        expenses = self.db.query(models.Expense).filter(
            models.Expense.group_id == group_id
        ).order_by(models.Expense.id).all()

        if not expenses:
            return []

        # Fetch all splits in one query instead of one per expense
        splits_by_expense = defaultdict(list)
        splits = self.db.query(models.ExpenseSplit).filter(
            models.ExpenseSplit.expense_id.in_([e.id for e in expenses])
        ).order_by(models.ExpenseSplit.id).all()
        for split in splits:
            splits_by_expense[split.expense_id].append(split)

        return [to_engine_expense(e, splits_by_expense[e.id]) for e in expenses]


def to_engine_expense(expense: models.Expense, splits: list[models.ExpenseSplit]) -> Expense:
    """Build an engine expense from a stored expense and its split rows."""
    if expense.split_type == SPLIT_CUSTOM:
        return Expense(
            id=expense.id,
            description=expense.description,
            amount=expense.amount,
            payer_id=expense.payer_id,
            split_type=SPLIT_CUSTOM,
            custom_splits=[SplitShare(s.user_id, s.amount) for s in splits],
        )
    return Expense(
        id=expense.id,
        description=expense.description,
        amount=expense.amount,
        payer_id=expense.payer_id,
        split_type=expense.split_type,
        participants=[s.user_id for s in splits],
    )
