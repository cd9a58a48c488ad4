"""HTTP proxies for collections served by the generic CRUD routers."""

from __future__ import annotations

from rest_commons.client.base import RestClient, build_client
from rest_commons.client.resource import ChildCrudRestResource, CrudRestResource

__all__ = ["ChildCrudRestResource", "CrudRestResource", "RestClient", "build_client"]
