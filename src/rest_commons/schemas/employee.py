from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class EmployeeEdit(BaseModel):
    """Schema for creating or replacing an employee of a company."""

    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr | None = None


class EmployeeRead(BaseModel):
    id: str
    company_id: str
    first_name: str
    last_name: str
    email: str | None

    model_config = ConfigDict(from_attributes=True)
