from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CompanyEdit(BaseModel):
    """Schema for creating or replacing a company."""

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr
    url: str | None = Field(default=None, max_length=255)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "testcompany",
                "email": "test@company.org",
                "url": "https://company.org",
            }
        },
    )


class CompanyRead(BaseModel):
    """Single company response schema."""

    id: str
    name: str | None
    email: str
    url: str | None

    model_config = ConfigDict(from_attributes=True)
