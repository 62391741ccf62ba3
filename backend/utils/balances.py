"""Balance aggregation: fold a group's expenses into a net balance per member."""

import logging
from decimal import Decimal
from typing import Iterable

from utils.engine import (
    SPLIT_CUSTOM,
    SPLIT_EQUAL,
    TOLERANCE,
    Expense,
    InvalidParticipant,
    MalformedExpense,
    Member,
    NetBalance,
)


logger = logging.getLogger(__name__)


def validate_expense(expense: Expense, member_ids) -> None:
    """
    Check that an expense can be applied to a group with the given member ids.

    Raises:
        InvalidParticipant: payer or a participant is not a group member
        MalformedExpense: bad amount, unknown split type, empty equal split,
            or custom lines that don't sum to the expense amount
    """
    if expense.amount <= 0:
        raise MalformedExpense(f"Expense amount must be positive, got {expense.amount}")

    if expense.payer_id not in member_ids:
        raise InvalidParticipant(expense.payer_id, expense.id)

    if expense.split_type == SPLIT_EQUAL:
        if not expense.participants:
            raise MalformedExpense("Equal split requires at least one participant")
        for member_id in expense.participants:
            if member_id not in member_ids:
                raise InvalidParticipant(member_id, expense.id)

    elif expense.split_type == SPLIT_CUSTOM:
        if not expense.custom_splits:
            raise MalformedExpense("Custom split requires at least one split line")
        for split in expense.custom_splits:
            if split.member_id not in member_ids:
                raise InvalidParticipant(split.member_id, expense.id)
            if split.amount < 0:
                raise MalformedExpense(f"Split amount for {split.member_id!r} is negative")
        split_total = sum((s.amount for s in expense.custom_splits), Decimal("0"))
        if abs(split_total - expense.amount) > TOLERANCE:
            raise MalformedExpense(
                f"Custom split amounts must equal the total expense amount. "
                f"Total: {expense.amount}, Sum: {split_total}"
            )

    else:
        raise MalformedExpense(f"Unknown split type {expense.split_type!r}")


def compute_balances(members: Iterable[Member], expenses: Iterable[Expense]) -> NetBalance:
    """
    Calculate the net balance of every member across a set of expenses.

    Each expense credits its payer with the full amount and debits the
    participants their share. Equal shares are exact Decimal quotients and are
    never rounded here; the minimizer's tolerance absorbs the residue.

    Args:
        members: Group members. Every member gets an entry, even at zero.
        expenses: Expense snapshots for the group, in any order.

    Returns:
        Mapping of member id to signed balance. Positive means the member is
        owed money, negative means the member owes money.
    """
    balances: NetBalance = {member.id: Decimal("0") for member in members}

    count = 0
    for expense in expenses:
        validate_expense(expense, balances)

        balances[expense.payer_id] += expense.amount

        if expense.split_type == SPLIT_EQUAL:
            share = expense.amount / len(expense.participants)
            for member_id in expense.participants:
                balances[member_id] -= share
        else:
            for split in expense.custom_splits:
                balances[split.member_id] -= split.amount
        count += 1

    logger.debug("Aggregated %d expenses over %d members", count, len(balances))
    return balances
