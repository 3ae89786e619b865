from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Field types stay loose: the evaluation workflow owns validation and reports
# problems as 400 with a readable message.
class GuestEvaluationCreate(_CamelModel):
    email: Optional[Any] = None
    type: Optional[Any] = None
    title: Optional[Any] = None
    answers: Optional[Any] = None
    interest: Optional[Any] = None
    first_name: Optional[Any] = Field(default=None, alias="firstName")
    last_name: Optional[Any] = Field(default=None, alias="lastName")
    company: Optional[Any] = None
    phone_number: Optional[Any] = Field(default=None, alias="phoneNumber")


class EvaluationCreate(_CamelModel):
    type: Optional[Any] = None
    title: Optional[Any] = None
    answers: Optional[Any] = None
    interest: Optional[Any] = None
    # Accepted for compatibility; the caller is taken from the session.
    user_id: Optional[Any] = Field(default=None, alias="userId")


class EmailValidationRequest(BaseModel):
    email: Optional[Any] = None


class EmailValidationResponse(_CamelModel):
    is_valid: bool = Field(alias="isValid")
    reason: Optional[str] = None


class ProfileResponse(_CamelModel):
    id: str
    user_id: int = Field(alias="userId")
    email: Optional[str] = None
    role: str
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    company: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class ProfileRoleUpdate(BaseModel):
    role: str
