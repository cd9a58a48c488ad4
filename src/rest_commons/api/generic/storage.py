"""Storage capability for generic CRUD handlers and its SQLAlchemy implementation."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any, Generic, Protocol, TypeVar

import sqlalchemy as sa
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rest_commons.exceptions import ConflictError, ValidationFailure
from rest_commons.schemas.generic import ErrorResponse
from rest_commons.schemas.paging import PageRequest, SortDirection, SortOrder

E = TypeVar("E")


@dataclasses.dataclass(frozen=True)
class EntityPage(Generic[E]):
    """Entities of one page plus the number of entities matching overall."""

    content: list[E]
    total_elements: int


class Storage(Protocol[E]):
    """What a resource handler needs from the backing store."""

    def find_by_id(self, entity_id: Any) -> E | None: ...

    def find_page(self, page_request: PageRequest) -> EntityPage[E]: ...

    def save(self, entity: E) -> E: ...

    def delete(self, entity: E) -> None: ...

    def scoped(self, attribute: str, value: Any) -> Storage[E]:
        """Return a view limited to entities whose ``attribute`` equals ``value``."""
        ...


class SqlAlchemyStorage(Generic[E]):
    """Storage over one mapped model class and a SQLAlchemy session.

    Writes commit immediately; there is no optimistic locking, so
    concurrent updates of the same row are last-write-wins.

    Args:
        session: Session bound to the current request.
        model: SQLAlchemy model class.
        default_sort: Sort used when a page request has none.
        criteria: WHERE clauses every query is restricted to.
    """

    def __init__(
        self,
        session: Session,
        model: type[E],
        *,
        default_sort: Sequence[SortOrder] = (),
        criteria: Sequence[Any] = (),
    ) -> None:
        self.session = session
        self.model = model
        self.default_sort = tuple(default_sort)
        self.criteria = tuple(criteria)
        mapper = sa.inspect(model)
        self._primary_key = mapper.primary_key[0]
        self._sortable = {attr.key for attr in mapper.column_attrs}

    def find_by_id(self, entity_id: Any) -> E | None:
        if not self.criteria:
            return self.session.get(self.model, entity_id)
        query = select(self.model).where(self._primary_key == entity_id, *self.criteria)
        return self.session.execute(query).scalars().first()

    def find_page(self, page_request: PageRequest) -> EntityPage[E]:
        order_by = self._order_clauses(page_request.sort or self.default_sort)
        count_query = select(func.count()).select_from(self.model).where(*self.criteria)
        total = self.session.execute(count_query).scalar() or 0

        offset = page_request.page * page_request.page_size
        if offset >= total:
            # Past the end: no data query, so oversized offsets never reach the database
            return EntityPage(content=[], total_elements=total)

        data_query = select(self.model).where(*self.criteria).order_by(*order_by)
        data_query = data_query.offset(offset).limit(page_request.page_size)

        items = self.session.execute(data_query).scalars().all()
        return EntityPage(content=list(items), total_elements=total)

    def save(self, entity: E) -> E:
        self.session.add(entity)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError(f"Record conflicts with an existing entry: {exc.orig}") from None
        self.session.refresh(entity)
        return entity

    def delete(self, entity: E) -> None:
        self.session.delete(entity)
        self.session.commit()

    def scoped(self, attribute: str, value: Any) -> SqlAlchemyStorage[E]:
        column = getattr(self.model, attribute)
        return SqlAlchemyStorage(
            self.session,
            self.model,
            default_sort=self.default_sort,
            criteria=(*self.criteria, column == value),
        )

    def _order_clauses(self, sort: Sequence[SortOrder]) -> list[Any]:
        unknown = [order.field for order in sort if order.field not in self._sortable]
        if unknown:
            errors = ErrorResponse(status=400, message="Invalid paging parameters")
            for field in unknown:
                errors.add_field("sort", f"unknown sort field '{field}'")
            raise ValidationFailure(errors)

        clauses = []
        for order in sort:
            column = getattr(self.model, order.field)
            clauses.append(column.desc() if order.direction == SortDirection.DESC else column.asc())
        # Primary key as last criterion keeps paging deterministic on ties
        clauses.append(self._primary_key.asc())
        return clauses
