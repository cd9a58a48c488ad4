from __future__ import annotations

from fastapi import APIRouter, Depends

from rest_commons.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/healthz")
def health_check(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    return {"status": "ok", "version": settings.app_version}
