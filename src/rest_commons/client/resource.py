"""Client-side proxies for collections served by the generic CRUD routers.

``CrudRestResource`` talks to ``{base}/[{id}]``; ``ChildCrudRestResource``
binds a ``CrudRestResource`` to ``{base}/{parentId}/{childPath}/[{id}]``
per call.

Example::

    with RestClient(timeout=10) as rest_client:
        companies = CrudRestResource("https://api.example.org/api/v1/companies", CompanyRead, rest_client)
        page = companies.find(PageRequest(0, 50, (SortOrder.asc("name"),)))
        company = companies.get_by_id("abc")  # None when it does not exist
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

import httpx
from pydantic import BaseModel

from rest_commons.client.base import RestClient
from rest_commons.client.uri import ensure_ends_with_slash, join_url, quote_segment
from rest_commons.schemas.generic import PageResult
from rest_commons.schemas.paging import PageRequest, decode_page_result, encode_page_request

D = TypeVar("D", bound=BaseModel)

Edit = BaseModel | Mapping[str, Any]


class CrudRestResource(Generic[D]):
    """Proxy for one remote collection.

    Args:
        base_url: Collection URL, with or without trailing slash.
        response_schema: Pydantic schema DTOs are decoded into.
        rest_client: Shared client; a default one is built when omitted.
    """

    def __init__(self, base_url: str, response_schema: type[D], rest_client: RestClient | None = None) -> None:
        self.base_url = ensure_ends_with_slash(base_url)
        self.response_schema = response_schema
        self.rest_client = rest_client if rest_client is not None else RestClient()

    def find(self, page: int | PageRequest, page_size: int | None = None) -> PageResult[D]:
        """Fetch one page, given as ``(page, page_size)`` or as a PageRequest."""
        if isinstance(page, PageRequest):
            if page_size is not None:
                raise TypeError("page_size must not be given together with a PageRequest")
            page_request = page
        else:
            if page_size is None:
                raise TypeError("page_size is required when page is an int")
            page_request = PageRequest(page=page, page_size=page_size)
        response = self.rest_client.exchange("GET", self.base_url, params=encode_page_request(page_request))
        return self.rest_client.render(response, self._decode_page)

    def get_by_id(self, entity_id: Any) -> D | None:
        """Fetch one entity; ``None`` when the server answers 404 or 204."""
        response = self.rest_client.exchange("GET", self.item_url(entity_id))
        if response.status_code in (httpx.codes.NOT_FOUND, httpx.codes.NO_CONTENT):
            return None
        return self.rest_client.render(response, self.response_schema.model_validate)

    def create(self, edit: Edit) -> D:
        response = self.rest_client.exchange("POST", self.base_url, body=edit)
        return self.rest_client.render(response, self.response_schema.model_validate)

    def update(self, entity_id: Any, edit: Edit) -> D:
        response = self.rest_client.exchange("PUT", self.item_url(entity_id), body=edit)
        return self.rest_client.render(response, self.response_schema.model_validate)

    def delete(self, entity_id: Any) -> None:
        response = self.rest_client.exchange("DELETE", self.item_url(entity_id))
        self.rest_client.raise_for_status(response)

    def execute_all(self, action: Callable[[D], Any], page_size: int) -> int:
        """Call ``action`` for every element, fetching pages one at a time.

        Pages are requested sequentially from page 0 until a short page or
        the last page. This is not a snapshot: elements added or removed
        between fetches may be skipped or seen twice.

        Returns:
            Number of elements passed to ``action``.
        """
        page_request = PageRequest(page=0, page_size=page_size)
        count = 0
        while True:
            result = self.find(page_request)
            for item in result.content:
                action(item)
            count += len(result.content)
            if len(result.content) < page_size or page_request.page + 1 >= result.total_pages:
                return count
            page_request = page_request.next()

    def item_url(self, entity_id: Any) -> str:
        return join_url(self.base_url, quote_segment(entity_id))

    def _decode_page(self, body: Any) -> PageResult[D]:
        return decode_page_result(body, self.response_schema.model_validate)


class ChildCrudRestResource(Generic[D]):
    """Proxy for a remote collection owned by parent entities.

    Args:
        base_parent_url: Parent collection URL, without any id.
        child_path: Path of the child collection below a parent.
        response_schema: Pydantic schema DTOs are decoded into.
        rest_client: Shared client; a default one is built when omitted.
    """

    def __init__(
        self,
        base_parent_url: str,
        child_path: str,
        response_schema: type[D],
        rest_client: RestClient | None = None,
    ) -> None:
        self.base_parent_url = ensure_ends_with_slash(base_parent_url)
        self.child_path = child_path
        self.response_schema = response_schema
        self.rest_client = rest_client if rest_client is not None else RestClient()

    def for_parent(self, parent_id: Any) -> CrudRestResource[D]:
        """Return a proxy bound to the child collection of ``parent_id``."""
        url = join_url(self.base_parent_url, quote_segment(parent_id), self.child_path, trailing_slash=True)
        return CrudRestResource(url, self.response_schema, self.rest_client)

    def find(self, parent_id: Any, page: int | PageRequest, page_size: int | None = None) -> PageResult[D]:
        return self.for_parent(parent_id).find(page, page_size)

    def get_by_id(self, parent_id: Any, entity_id: Any) -> D | None:
        return self.for_parent(parent_id).get_by_id(entity_id)

    def create(self, parent_id: Any, edit: Edit) -> D:
        return self.for_parent(parent_id).create(edit)

    def update(self, parent_id: Any, entity_id: Any, edit: Edit) -> D:
        return self.for_parent(parent_id).update(entity_id, edit)

    def delete(self, parent_id: Any, entity_id: Any) -> None:
        self.for_parent(parent_id).delete(entity_id)

    def execute_all(self, parent_id: Any, action: Callable[[D], Any], page_size: int) -> int:
        return self.for_parent(parent_id).execute_all(action, page_size)
