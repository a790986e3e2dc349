"""Mini README: Request bodies accepted by the JSON API.

Structure:
    * LoginPayload - admin username and password.
    * CategoryPayload, ProjectPayload, IncomePayload, ExpensePayload - bodies
      of the create (POST) and update (PUT) routes; both verbs take the full
      record.

Blank optional strings are stored as ``None`` so an empty donor field reads
as an anonymous donation. Amounts must be finite, non-negative and at most
``MAX_AMOUNT``; referenced ids must fit the store's integer range.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, validator

from ..ledger.records import MAX_AMOUNT, MAX_RECORD_ID


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class LoginPayload(BaseModel):
    username: str
    password: str


class CategoryPayload(BaseModel):
    name: str

    @validator("name")
    def _check_name(cls, value: str) -> str:
        return _required_text(value)


class ProjectPayload(BaseModel):
    name: str
    category_id: int = Field(..., ge=1, le=MAX_RECORD_ID)
    description: Optional[str] = None

    @validator("name")
    def _check_name(cls, value: str) -> str:
        return _required_text(value)


class IncomePayload(BaseModel):
    receipt_number: str
    amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    project_id: int = Field(..., ge=1, le=MAX_RECORD_ID)
    donor_name: Optional[str] = None
    date: dt.date
    notes: Optional[str] = None

    @validator("receipt_number")
    def _check_receipt_number(cls, value: str) -> str:
        return _required_text(value)

    @validator("donor_name", "notes")
    def _optional_text(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ExpensePayload(BaseModel):
    amount: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    project_id: int = Field(..., ge=1, le=MAX_RECORD_ID)
    description: str
    date: dt.date

    @validator("description")
    def _check_description(cls, value: str) -> str:
        return _required_text(value)
