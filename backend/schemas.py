from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, EmailStr, Field, PlainSerializer, field_validator
from typing import Annotated, Literal, Optional

VALID_CURRENCIES = ['INR', 'USD', 'EUR', 'GBP']

EXPENSE_CATEGORIES = Literal[
    'food', 'transport', 'accommodation', 'entertainment',
    'shopping', 'bills', 'healthcare', 'education', 'other'
]

# Amounts are Decimal internally and plain JSON numbers on the wire
MONEY_SERIALIZER = PlainSerializer(float, return_type=float, when_used="json")
Money = Annotated[Decimal, MONEY_SERIALIZER]
# Request amounts must be representable in a Numeric(12, 2) column as-is
Cents = Annotated[Decimal, Field(max_digits=12, decimal_places=2), MONEY_SERIALIZER]

class UserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None

class UserCreate(UserBase):
    password: str

class User(UserBase):
    id: int
    photo_url: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True

class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    photo_url: Optional[str] = Field(default=None, max_length=500)

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    email: Optional[str] = None

class GroupBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    currency: str = "INR"

    @field_validator('currency')
    @classmethod
    def validate_currency(cls, v):
        if v not in VALID_CURRENCIES:
            raise ValueError(f'Currency must be one of {VALID_CURRENCIES}')
        return v

class GroupCreate(GroupBase):
    pass

class GroupUpdate(GroupBase):
    pass

class Group(GroupBase):
    id: int
    created_by_id: int

    class Config:
        from_attributes = True

class GroupMemberAdd(BaseModel):
    email: str

class GroupMember(BaseModel):
    id: int
    user_id: int
    full_name: str
    email: str

    class Config:
        from_attributes = True

class GroupWithMembers(Group):
    members: list[GroupMember]

class CustomSplit(BaseModel):
    user_id: int
    amount: Cents = Field(ge=0)

class ExpenseCreate(BaseModel):
    description: str = Field(min_length=1, max_length=200)
    amount: Cents = Field(gt=0)
    payer_id: int
    split_type: Literal['equal', 'custom'] = 'equal'
    split_between: list[int] = []  # Participants for equal splits
    custom_splits: list[CustomSplit] = []  # Per-participant amounts for custom splits
    category: EXPENSE_CATEGORIES = 'other'
    date: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

class ExpenseUpdate(ExpenseCreate):
    pass

class Expense(BaseModel):
    id: int
    group_id: int
    description: str
    amount: Money
    payer_id: int
    split_type: str
    split_between: list[int] = []
    custom_splits: list[CustomSplit] = []
    category: str
    date: Optional[str] = None
    notes: Optional[str] = None
    created_by_id: Optional[int] = None

class MemberInfo(BaseModel):
    id: int
    full_name: str
    email: str

class MemberNetBalance(BaseModel):
    """Net position of a member. Positive means the member is owed money."""
    user: MemberInfo
    amount: Money

class SuggestedSettlement(BaseModel):
    from_user: MemberInfo
    to_user: MemberInfo
    amount: Money

class MemberBalanceSummary(BaseModel):
    user: MemberInfo
    total_owed: Money
    total_to_receive: Money
    net_balance: Money

class GroupSettlementSummary(BaseModel):
    total_expenses: int
    total_amount: Money
    currency: str
    member_count: int
    settlements: list[SuggestedSettlement]
    member_balances: list[MemberBalanceSummary]

class SettlementCreate(BaseModel):
    from_id: int
    to_id: int
    amount: Cents = Field(gt=0)
    notes: Optional[str] = Field(default=None, max_length=500)

class Settlement(BaseModel):
    id: int
    group_id: int
    from_id: int
    to_id: int
    amount: Money
    currency: str
    status: str
    settled_at: Optional[datetime] = None
    settled_by_id: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

class SettlementHistory(BaseModel):
    settlements: list[Settlement]
    pagination: Pagination
