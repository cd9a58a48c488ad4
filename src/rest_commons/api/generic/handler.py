"""Framework-independent CRUD handlers over a storage and a converter.

``ResourceHandler`` implements list/get/create/update/delete for one
collection. ``ChildResourceHandler`` wraps a ``ResourceHandler`` and scopes
every operation to one parent: an entity that exists but belongs to
another parent is reported exactly like a missing one.

Handlers keep no per-call state. Errors are raised, never logged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rest_commons.api.generic.converter import Converter
from rest_commons.api.generic.storage import Storage
from rest_commons.exceptions import NotFoundError, ValidationFailure
from rest_commons.schemas.generic import ErrorResponse, PageResult
from rest_commons.schemas.paging import PageRequest, parse_page_request

E = TypeVar("E")
D = TypeVar("D")
W = TypeVar("W", bound=BaseModel)


class ResourceHandler(Generic[E, D, W]):
    """CRUD operations for one collection.

    Args:
        storage: Storage capability for the entity.
        converter: Entity ↔ DTO converter.
        edit_schema: Pydantic schema write requests are validated against.
        resource_name: Human-readable name for not-found messages.
        default_page_size: Page size when the request does not set one.
        max_page_size: Upper bound for the requested page size.
    """

    def __init__(
        self,
        storage: Storage[E],
        converter: Converter[E, D, W],
        edit_schema: type[W],
        *,
        resource_name: str,
        default_page_size: int,
        max_page_size: int | None = None,
    ) -> None:
        self.storage = storage
        self.converter = converter
        self.edit_schema = edit_schema
        self.resource_name = resource_name
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def with_storage(self, storage: Storage[E]) -> ResourceHandler[E, D, W]:
        """Return a handler identical to this one but backed by ``storage``."""
        return ResourceHandler(
            storage,
            self.converter,
            self.edit_schema,
            resource_name=self.resource_name,
            default_page_size=self.default_page_size,
            max_page_size=self.max_page_size,
        )

    def find(self, query_params: Mapping[str, Any] | PageRequest) -> PageResult[D]:
        if isinstance(query_params, PageRequest):
            page_request = query_params
        else:
            page_request = parse_page_request(
                query_params,
                default_page_size=self.default_page_size,
                max_page_size=self.max_page_size,
            )
        page = self.storage.find_page(page_request)
        return PageResult.of(self.converter.from_entities(page.content), page_request, page.total_elements)

    def get_by_id(self, entity_id: Any) -> D:
        return self.converter.from_entity(self.get_entity(entity_id))

    def create(self, edit_data: W | Mapping[str, Any]) -> D:
        return self.create_entity(self.validate(edit_data))

    def create_entity(self, edit: W, **attributes: Any) -> D:
        """Build, persist and convert a new entity from validated ``edit``.

        Extra ``attributes`` are set on the entity before it is saved.
        """
        entity = self.converter.new_entity(edit)
        for name, value in attributes.items():
            setattr(entity, name, value)
        entity = self.storage.save(entity)
        return self.converter.from_entity(entity)

    def update(self, entity_id: Any, edit_data: W | Mapping[str, Any]) -> D:
        entity = self.get_entity(entity_id)
        edit = self.validate(edit_data)
        self.converter.update_entity_from_edit(edit, entity)
        entity = self.storage.save(entity)
        return self.converter.from_entity(entity)

    def delete(self, entity_id: Any) -> None:
        entity = self.get_entity(entity_id)
        self.storage.delete(entity)

    def get_entity(self, entity_id: Any) -> E:
        entity = self.storage.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.resource_name, entity_id)
        return entity

    def validate(self, edit_data: W | Mapping[str, Any]) -> W:
        """Return ``edit_data`` as an ``edit_schema`` instance.

        Instances pass through (they were validated when built); mappings
        are validated and every failure is reported per field path.
        """
        if isinstance(edit_data, self.edit_schema):
            return edit_data
        try:
            return self.edit_schema.model_validate(edit_data)
        except PydanticValidationError as exc:
            raise ValidationFailure(ErrorResponse.from_validation_errors(exc.errors())) from None


class ChildResourceHandler(Generic[E, D, W]):
    """CRUD operations for a collection owned by a parent entity.

    Args:
        resource: Handler for the child collection as a whole.
        parent_storage: Storage used to resolve parent ids.
        parent_attribute: Child attribute holding the parent id.
        parent_name: Human-readable parent name for not-found messages.
    """

    def __init__(
        self,
        resource: ResourceHandler[E, D, W],
        parent_storage: Storage[Any],
        parent_attribute: str,
        *,
        parent_name: str,
    ) -> None:
        self.resource = resource
        self.parent_storage = parent_storage
        self.parent_attribute = parent_attribute
        self.parent_name = parent_name

    def find(self, parent_id: Any, query_params: Mapping[str, Any] | PageRequest) -> PageResult[D]:
        self.get_parent(parent_id)
        return self._scoped(parent_id).find(query_params)

    def get_by_id(self, parent_id: Any, entity_id: Any) -> D:
        return self._scoped(parent_id).get_by_id(entity_id)

    def create(self, parent_id: Any, edit_data: W | Mapping[str, Any]) -> D:
        self.get_parent(parent_id)
        edit = self.resource.validate(edit_data)
        return self.resource.create_entity(edit, **{self.parent_attribute: parent_id})

    def update(self, parent_id: Any, entity_id: Any, edit_data: W | Mapping[str, Any]) -> D:
        self.get_parent(parent_id)
        return self._scoped(parent_id).update(entity_id, edit_data)

    def delete(self, parent_id: Any, entity_id: Any) -> None:
        self._scoped(parent_id).delete(entity_id)

    def get_parent(self, parent_id: Any) -> Any:
        parent = self.parent_storage.find_by_id(parent_id)
        if parent is None:
            raise NotFoundError(self.parent_name, parent_id)
        return parent

    def _scoped(self, parent_id: Any) -> ResourceHandler[E, D, W]:
        return self.resource.with_storage(self.resource.storage.scoped(self.parent_attribute, parent_id))
