from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .analytics import round2
from .errors import ValidationFailed
from .models import CATEGORIES


class ExpenseIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: str
    description: Optional[str] = Field(None, max_length=200)
    date: datetime

    @field_validator("amount")
    @classmethod
    def whole_cents(cls, v: float) -> float:
        v = round2(v)
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    @field_validator("category")
    @classmethod
    def known_category(cls, v: str) -> str:
        if v not in CATEGORIES:
            raise ValueError(f"Category must be one of: {', '.join(CATEGORIES)}")
        return v

    @field_validator("date")
    @classmethod
    def local_naive(cls, v: datetime) -> datetime:
        # stored dates are naive server-local time
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


class BudgetIn(BaseModel):
    monthlyBudget: float = Field(..., ge=0, allow_inf_nan=False)


class TrendQuery(BaseModel):
    months: int = Field(6, ge=1)


class ExpenseListQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    category: Optional[str] = None
    startDate: Optional[datetime] = None
    endDate: Optional[datetime] = None

    @field_validator("category", "startDate", "endDate", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Credentials(BaseModel):
    username: str = Field(..., min_length=3, max_length=80)
    password: str = Field(..., min_length=6)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v


def parse(model, data):
    """Validate ``data`` against ``model`` or raise :class:`ValidationFailed`."""
    try:
        return model.model_validate(data or {})
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(exc) from exc
