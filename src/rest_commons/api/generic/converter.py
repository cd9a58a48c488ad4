"""Conversion between stored entities and wire DTOs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel

E = TypeVar("E")
D = TypeVar("D")
W = TypeVar("W", bound=BaseModel)


class Converter(Protocol[E, D, W]):
    def from_entity(self, entity: E) -> D: ...

    def from_entities(self, entities: Sequence[E]) -> list[D]: ...

    def new_entity(self, edit: W) -> E: ...

    def update_entity_from_edit(self, edit: W, entity: E) -> None: ...


class ModelConverter(Generic[E, D, W]):
    """Converter for a SQLAlchemy model and pydantic schemas with matching field names.

    Updates assign every field of the edit schema, so PUT replaces the
    editable state of the entity.
    """

    def __init__(self, model: type[E], response_schema: type[D]) -> None:
        self.model = model
        self.response_schema = response_schema

    def from_entity(self, entity: E) -> D:
        return self.response_schema.model_validate(entity)

    def from_entities(self, entities: Sequence[E]) -> list[D]:
        return [self.from_entity(entity) for entity in entities]

    def new_entity(self, edit: W) -> E:
        return self.model(**edit.model_dump())

    def update_entity_from_edit(self, edit: W, entity: E) -> None:
        for field, value in edit.model_dump().items():
            setattr(entity, field, value)
