"""Debt simplification: turn net balances into a short list of transfers."""

import logging
from decimal import Decimal
from typing import Iterable

from utils.engine import (
    TOLERANCE,
    BalanceInvariantError,
    Expense,
    GroupSettlement,
    Member,
    MemberBalance,
    NetBalance,
    Transfer,
    round_amount,
)
from utils.balances import compute_balances


logger = logging.getLogger(__name__)


def check_zero_sum(net_balance: NetBalance) -> None:
    """Raise BalanceInvariantError if the balances don't sum to zero within tolerance."""
    total = sum(net_balance.values(), Decimal("0"))
    if abs(total) > TOLERANCE:
        logger.error("Net balances sum to %s instead of zero: %r", total, net_balance)
        raise BalanceInvariantError(f"Net balances sum to {total}, expected 0")


def compute_settlements(net_balance: NetBalance) -> list[Transfer]:
    """
    Simplify debts with a greedy largest-creditor / largest-debtor matching.

    Algorithm:
    1. Split members into creditors (> 0.01) and debtors (< -0.01)
    2. Sort both by magnitude, largest first (stable, ties keep input order)
    3. Match the current largest pair for min(remaining credit, remaining debt)
    4. Move past whichever side drops to within 0.01 of zero

    Emitted amounts are rounded to cents; the running remainders are not.
    """
    check_zero_sum(net_balance)

    creditors = []
    debtors = []
    for member_id, amount in net_balance.items():
        if amount > TOLERANCE:
            creditors.append([member_id, amount])
        elif amount < -TOLERANCE:
            debtors.append([member_id, -amount])

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(creditor[1], debtor[1])

        if amount > TOLERANCE:
            transfers.append(Transfer(
                from_id=debtor[0],
                to_id=creditor[0],
                amount=round_amount(amount)
            ))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] <= TOLERANCE:
            i += 1
        if debtor[1] <= TOLERANCE:
            j += 1

    logger.debug(
        "Simplified %d creditors and %d debtors into %d transfers",
        len(creditors), len(debtors), len(transfers)
    )
    return transfers


def apply_transfers(net_balance: NetBalance, transfers: Iterable[Transfer]) -> NetBalance:
    """Return the balances left over after every transfer has been paid."""
    remaining = dict(net_balance)
    for transfer in transfers:
        remaining[transfer.from_id] = remaining.get(transfer.from_id, Decimal("0")) + transfer.amount
        remaining[transfer.to_id] = remaining.get(transfer.to_id, Decimal("0")) - transfer.amount
    return remaining


def summarize_balances(member_ids: Iterable, transfers: Iterable[Transfer]) -> list[MemberBalance]:
    """
    Accumulate transfers per member.

    total_owed is what the member pays out, total_to_receive what is paid to
    them, and net_balance the difference (positive means owed money).
    """
    summary = {member_id: MemberBalance(member_id=member_id) for member_id in member_ids}

    for transfer in transfers:
        payer = summary.setdefault(transfer.from_id, MemberBalance(member_id=transfer.from_id))
        payer.total_owed += transfer.amount
        payer.net_balance -= transfer.amount

        payee = summary.setdefault(transfer.to_id, MemberBalance(member_id=transfer.to_id))
        payee.total_to_receive += transfer.amount
        payee.net_balance += transfer.amount

    return list(summary.values())


def settle_group(members: Iterable[Member], expenses: Iterable[Expense]) -> GroupSettlement:
    """Compute net balances, the transfers that settle them and a per-member summary."""
    members = list(members)
    net_balance = compute_balances(members, expenses)
    settlements = compute_settlements(net_balance)
    return GroupSettlement(
        net_balance=net_balance,
        settlements=settlements,
        member_balances=summarize_balances(net_balance.keys(), settlements)
    )
