"""Value types, constants and errors shared by the settlement engine.

The engine works on plain data only. Repositories turn stored rows into these
types and routers turn the results back into response schemas.
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Hashable, Optional, Tuple


# Balances within this band of zero are considered settled
TOLERANCE = Decimal("0.01")
CENTS = Decimal("0.01")

SPLIT_EQUAL = "equal"
SPLIT_CUSTOM = "custom"
SPLIT_TYPES = (SPLIT_EQUAL, SPLIT_CUSTOM)

MemberId = Hashable
NetBalance = Dict[MemberId, Decimal]


class EngineError(Exception):
    """Base class for rejected engine input."""


class InvalidParticipant(EngineError):
    """An expense references a member that is not part of the group."""

    def __init__(self, member_id, expense_id=None):
        self.member_id = member_id
        self.expense_id = expense_id
        super().__init__(f"Member {member_id!r} is not part of this group")


class MalformedExpense(EngineError):
    """An expense whose amounts or split definition cannot be applied."""


class BalanceInvariantError(AssertionError):
    """Net balances do not sum to zero. Indicates a bug upstream of the engine."""


def to_decimal(value) -> Decimal:
    """Coerce an int, float, str or Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_amount(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Member:
    id: MemberId
    name: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class SplitShare:
    member_id: MemberId
    amount: Decimal

    def __post_init__(self):
        object.__setattr__(self, "amount", to_decimal(self.amount))


@dataclass(frozen=True)
class Expense:
    """
    An immutable expense snapshot.

    `participants` is used for equal splits, `custom_splits` for custom splits.
    Lists passed in are frozen into tuples.
    """
    amount: Decimal
    payer_id: MemberId
    split_type: str = SPLIT_EQUAL
    participants: Tuple[MemberId, ...] = ()
    custom_splits: Tuple[SplitShare, ...] = ()
    id: Optional[MemberId] = None
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "participants", tuple(self.participants))
        object.__setattr__(self, "custom_splits", tuple(
            s if isinstance(s, SplitShare) else SplitShare(*s)
            for s in self.custom_splits
        ))


@dataclass(frozen=True)
class Transfer:
    """A recommended payment from a debtor to a creditor."""
    from_id: MemberId
    to_id: MemberId
    amount: Decimal


@dataclass
class MemberBalance:
    member_id: MemberId
    total_owed: Decimal = Decimal("0")
    total_to_receive: Decimal = Decimal("0")
    net_balance: Decimal = Decimal("0")


@dataclass
class GroupSettlement:
    net_balance: NetBalance
    settlements: list = field(default_factory=list)
    member_balances: list = field(default_factory=list)
