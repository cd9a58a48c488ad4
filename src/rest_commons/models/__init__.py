from rest_commons.models.company import Company
from rest_commons.models.employee import Employee

__all__ = ["Company", "Employee"]
