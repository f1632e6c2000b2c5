"""
Core Record Models for the Expense Tracker

These models define the three persisted collections: users, categories and
expenses. They are designed to:
1. Enforce types at the storage boundary
2. Serialize to the flat JSON layout (camelCase keys) and back
3. Keep money as Decimal end to end

DESIGN DECISION: Python attributes are snake_case, persisted keys are
camelCase. Both names are accepted when loading.

Strings are stored exactly as given. Passwords in particular are compared
character for character, so no whitespace is trimmed on the way in.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def to_decimal(value) -> Decimal:
    """Convert a caller-supplied amount to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


class RecordModel(BaseModel):
    """Base for persisted records."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def floats_to_decimal(cls, v, info):
        # Only money fields are Decimal; keep float precision out of them
        field = cls.model_fields.get(info.field_name)
        if field is not None and field.annotation is Decimal and isinstance(v, float):
            return Decimal(str(v))
        return v


# =============================================================================
# ENUMS
# =============================================================================

class PaymentMethod(str, Enum):
    """How an expense was paid."""
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    UPI = "UPI"
    OTHER = "OTHER"


# =============================================================================
# USER
# =============================================================================

class User(RecordModel):
    """
    A registered user.

    The username is the primary key and cannot change after creation.
    The password is stored as given; see AccountDirectory.login.
    """

    username: str = Field(
        ...,
        frozen=True,
        description="Unique login name"
    )
    password_secret: str = Field(
        ...,
        description="Opaque credential"
    )
    email: str
    full_name: str
    monthly_budget: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Monthly spending budget"
    )
    created_at: datetime = Field(
        default_factory=datetime.now
    )


# =============================================================================
# CATEGORY
# =============================================================================

class Category(RecordModel):
    """
    An expense category shared by all users.

    Frozen so it can key the category-wise totals. Changing the budget limit
    means storing a new instance with the same id.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    name: str = Field(..., min_length=1)
    description: str = ""
    budget_limit: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Budget limit for this category"
    )
    color_code: str = Field(
        default="#8A8A8A",
        description="Display hint, not interpreted"
    )


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id=1, name="Food & Dining", description="Restaurants, groceries, snacks", color_code="#FF6B6B"),
    Category(id=2, name="Transportation", description="Fuel, taxi, public transport", color_code="#4ECDC4"),
    Category(id=3, name="Shopping", description="Clothes, electronics, items", color_code="#FFD166"),
    Category(id=4, name="Entertainment", description="Movies, games, hobbies", color_code="#06D6A0"),
    Category(id=5, name="Bills & Utilities", description="Electricity, water, internet", color_code="#118AB2"),
    Category(id=6, name="Healthcare", description="Medicine, doctor visits", color_code="#EF476F"),
    Category(id=7, name="Education", description="Books, courses, tuition", color_code="#7209B7"),
    Category(id=8, name="Others", description="Miscellaneous expenses", color_code="#8A8A8A"),
)


# =============================================================================
# EXPENSE
# =============================================================================

class Expense(RecordModel):
    """
    A dated expense owned by one user.

    CRITICAL: `id` is unique only within the owner's expenses.
    Anything shown outside the ledger must use `key`, i.e. (username, id).

    `amount` is not checked for positivity here; callers enforce it.
    """

    id: int = Field(..., ge=1)
    username: str
    title: str
    description: Optional[str] = None
    amount: Decimal
    category_id: int
    expense_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the expense"
    )
    payment_method: PaymentMethod = PaymentMethod.CASH
    is_recurring: bool = False
    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Informational only"
    )

    @property
    def key(self) -> tuple[str, int]:
        """The globally unique identifier of this expense."""
        return (self.username, self.id)

    @property
    def date_key(self) -> str:
        """ISO `YYYY-MM-DD` form, which sorts chronologically."""
        return self.expense_date.isoformat()
