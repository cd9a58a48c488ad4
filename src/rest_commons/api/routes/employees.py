from __future__ import annotations

from rest_commons.api.generic.router import create_child_crud_router
from rest_commons.models.company import Company
from rest_commons.models.employee import Employee
from rest_commons.schemas.employee import EmployeeEdit, EmployeeRead
from rest_commons.schemas.paging import SortOrder

router = create_child_crud_router(
    prefix="/companies/{parent_id}/employees",
    tags=["employees"],
    model=Employee,
    response_schema=EmployeeRead,
    edit_schema=EmployeeEdit,
    resource_name="Employee",
    parent_model=Company,
    parent_attribute="company_id",
    parent_name="Company",
    default_sort=[SortOrder.asc("last_name"), SortOrder.asc("first_name")],
)
