from __future__ import annotations

from rest_commons.app import create_app

app = create_app()
