from __future__ import annotations

from rest_commons.api.generic.router import create_crud_router
from rest_commons.models.company import Company
from rest_commons.schemas.company import CompanyEdit, CompanyRead

router = create_crud_router(
    prefix="/companies",
    tags=["companies"],
    model=Company,
    response_schema=CompanyRead,
    edit_schema=CompanyEdit,
    resource_name="Company",
)
