"""Paged CRUD resources over HTTP: FastAPI handlers and httpx client proxies."""

__version__ = "0.1.0"
