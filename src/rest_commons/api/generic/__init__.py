"""Generic CRUD handlers, storage and router factories."""

from __future__ import annotations

from rest_commons.api.generic.converter import Converter, ModelConverter
from rest_commons.api.generic.handler import ChildResourceHandler, ResourceHandler
from rest_commons.api.generic.router import create_child_crud_router, create_crud_router
from rest_commons.api.generic.storage import EntityPage, SqlAlchemyStorage, Storage

__all__ = [
    "ChildResourceHandler",
    "Converter",
    "EntityPage",
    "ModelConverter",
    "ResourceHandler",
    "SqlAlchemyStorage",
    "Storage",
    "create_child_crud_router",
    "create_crud_router",
]
