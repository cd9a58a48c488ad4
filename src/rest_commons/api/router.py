from __future__ import annotations

from fastapi import APIRouter

from rest_commons.api.routes import companies, employees, health

router = APIRouter()
router.include_router(health.router)
router.include_router(companies.router)
router.include_router(employees.router)
