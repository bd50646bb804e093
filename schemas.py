from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional, List
from datetime import datetime, timezone

from common.enum import EntryCategoryEnum


class ApiModel(BaseModel):
    """Base for response bodies: built from ORM rows, serialised with camelCase keys."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


def _normalize_date(value: Optional[datetime]) -> Optional[datetime]:
    # Stored dates are naive UTC
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Auth Schemas
class UserCredentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=150)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("username must not be blank")
        return value


class UserRegister(UserCredentials):
    pass


class UserLogin(UserCredentials):
    pass


class MessageResponse(BaseModel):
    message: str


class LoginResponse(ApiModel):
    token: str
    user_id: int


class TokenClaims(ApiModel):
    user_id: int
    username: str


class AuthenticateResponse(BaseModel):
    message: str
    user: Dict[str, Any]


# Entry Schemas
class EntryCreate(BaseModel):
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    description: Optional[str] = None
    date: Optional[datetime] = None
    category: EntryCategoryEnum

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _normalize_date(value)


class EntryUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    description: Optional[str] = None
    date: Optional[datetime] = None
    category: Optional[EntryCategoryEnum] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _normalize_date(value)


class EntryResponse(ApiModel):
    id: int
    amount: float
    description: Optional[str]
    date: datetime
    category: EntryCategoryEnum
    user_id: int


# Dashboard Schemas
class DashboardResponse(ApiModel):
    current_month_income_total: float
    current_month_expense_total: float
    current_month_expenses: List[EntryResponse]
    current_month_income: List[EntryResponse]
    current_month_entries: List[EntryResponse]
