"""Router factories exposing generic CRUD handlers over HTTP.

Per collection root ``R``::

    GET    R          page, pageSize, sort*   200 PageResult
    GET    R/{id}                             200 DTO | 404
    POST   R          Edit DTO                201 DTO | 400 ErrorResponse
    PUT    R/{id}     Edit DTO                200 DTO | 404 | 400 ErrorResponse
    DELETE R/{id}                             204     | 404

Errors are raised by the handlers and rendered by the app-level handlers
in ``rest_commons.api.error_handlers``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.orm import Session
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from rest_commons.api.generic.converter import Converter, ModelConverter
from rest_commons.api.generic.handler import ChildResourceHandler, ResourceHandler
from rest_commons.api.generic.storage import SqlAlchemyStorage
from rest_commons.core.config import Settings, get_settings
from rest_commons.db.session import get_db
from rest_commons.schemas.generic import ErrorResponse, NotFoundResponse, PageResult
from rest_commons.schemas.paging import SortOrder

_NOT_FOUND = {404: {"model": NotFoundResponse}}
_INVALID = {400: {"model": ErrorResponse}}


def _id_annotation(id_pattern: str | None) -> Any:
    if id_pattern is None:
        return str
    return Annotated[str, Path(pattern=id_pattern)]


def _add_collection_route(router: APIRouter, endpoint: Any, **kwargs: Any) -> None:
    # Clients join collection URLs with a trailing slash; serve both forms
    # instead of redirecting.
    router.add_api_route("", endpoint, **kwargs)
    router.add_api_route("/", endpoint, include_in_schema=False, **kwargs)


def _resource_handler_factory(
    *,
    model: type,
    response_schema: type,
    edit_schema: type,
    resource_name: str,
    converter: Converter | None,
    default_sort: Sequence[SortOrder],
):
    converter = converter or ModelConverter(model, response_schema)

    def build(db: Session, settings: Settings) -> ResourceHandler:
        return ResourceHandler(
            SqlAlchemyStorage(db, model, default_sort=default_sort),
            converter,
            edit_schema,
            resource_name=resource_name,
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
        )

    return build


def create_crud_router(
    *,
    prefix: str,
    tags: list[str],
    model: type,
    response_schema: type,
    edit_schema: type,
    resource_name: str,
    converter: Converter | None = None,
    default_sort: Sequence[SortOrder] = (),
    id_pattern: str | None = None,
) -> APIRouter:
    """Create an APIRouter with list, get, create, update and delete endpoints.

    Args:
        prefix: URL prefix (e.g. "/companies").
        tags: OpenAPI tags.
        model: SQLAlchemy model class.
        response_schema: Pydantic response schema.
        edit_schema: Pydantic schema for create/update bodies.
        resource_name: Human-readable name for 404 messages.
        converter: Entity ↔ DTO converter. Defaults to ModelConverter.
        default_sort: Sort applied when the request has none.
        id_pattern: Optional regex the path ID must match.

    Returns:
        Configured APIRouter.
    """
    router = APIRouter(prefix=prefix, tags=tags)
    name_lower = resource_name.lower()
    build_handler = _resource_handler_factory(
        model=model,
        response_schema=response_schema,
        edit_schema=edit_schema,
        resource_name=resource_name,
        converter=converter,
        default_sort=default_sort,
    )

    def list_items(
        request: Request,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ) -> Any:
        return build_handler(db, settings).find(request.query_params)

    def get_item(item_id, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> Any:
        return build_handler(db, settings).get_by_id(item_id)

    def create_item(payload, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> Any:
        return build_handler(db, settings).create(payload)

    def update_item(
        item_id, payload, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
    ) -> Any:
        return build_handler(db, settings).update(item_id, payload)

    def delete_item(item_id, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)) -> None:
        build_handler(db, settings).delete(item_id)

    # `from __future__ import annotations` turns annotations into strings,
    # so the dynamic schema types are set on the functions directly.
    for endpoint in (get_item, update_item, delete_item):
        endpoint.__annotations__["item_id"] = _id_annotation(id_pattern)
    for endpoint in (create_item, update_item):
        endpoint.__annotations__["payload"] = edit_schema

    list_items.__name__ = f"list_{name_lower}s"
    get_item.__name__ = f"get_{name_lower}"
    create_item.__name__ = f"create_{name_lower}"
    update_item.__name__ = f"update_{name_lower}"
    delete_item.__name__ = f"delete_{name_lower}"

    _add_collection_route(
        router,
        list_items,
        methods=["GET"],
        response_model=PageResult[response_schema],
        responses=_INVALID,
        name=f"list_{name_lower}s",
    )
    _add_collection_route(
        router,
        create_item,
        methods=["POST"],
        response_model=response_schema,
        status_code=HTTP_201_CREATED,
        responses=_INVALID,
        name=f"create_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        get_item,
        methods=["GET"],
        response_model=response_schema,
        responses=_NOT_FOUND,
        name=f"get_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        update_item,
        methods=["PUT"],
        response_model=response_schema,
        responses={**_NOT_FOUND, **_INVALID},
        name=f"update_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        delete_item,
        methods=["DELETE"],
        status_code=HTTP_204_NO_CONTENT,
        responses=_NOT_FOUND,
        name=f"delete_{name_lower}",
    )

    return router


def create_child_crud_router(
    *,
    prefix: str,
    tags: list[str],
    model: type,
    response_schema: type,
    edit_schema: type,
    resource_name: str,
    parent_model: type,
    parent_attribute: str,
    parent_name: str,
    converter: Converter | None = None,
    default_sort: Sequence[SortOrder] = (),
    id_pattern: str | None = None,
) -> APIRouter:
    """Create an APIRouter for a collection owned by a parent entity.

    Args:
        prefix: URL prefix containing the ``{parent_id}`` segment
            (e.g. "/companies/{parent_id}/employees").
        parent_model: SQLAlchemy model class of the parent.
        parent_attribute: Child model attribute holding the parent id.
        parent_name: Human-readable parent name for 404 messages.

        Remaining arguments as for ``create_crud_router``.

    Returns:
        Configured APIRouter.
    """
    router = APIRouter(prefix=prefix, tags=tags)
    name_lower = resource_name.lower()
    build_resource = _resource_handler_factory(
        model=model,
        response_schema=response_schema,
        edit_schema=edit_schema,
        resource_name=resource_name,
        converter=converter,
        default_sort=default_sort,
    )

    def build_handler(db: Session, settings: Settings) -> ChildResourceHandler:
        return ChildResourceHandler(
            build_resource(db, settings),
            SqlAlchemyStorage(db, parent_model),
            parent_attribute,
            parent_name=parent_name,
        )

    def list_items(
        parent_id: str,
        request: Request,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ) -> Any:
        return build_handler(db, settings).find(parent_id, request.query_params)

    def get_item(
        parent_id: str, item_id, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
    ) -> Any:
        return build_handler(db, settings).get_by_id(parent_id, item_id)

    def create_item(
        parent_id: str, payload, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
    ) -> Any:
        return build_handler(db, settings).create(parent_id, payload)

    def update_item(
        parent_id: str,
        item_id,
        payload,
        *,
        db: Session = Depends(get_db),
        settings: Settings = Depends(get_settings),
    ) -> Any:
        return build_handler(db, settings).update(parent_id, item_id, payload)

    def delete_item(
        parent_id: str, item_id, *, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
    ) -> None:
        build_handler(db, settings).delete(parent_id, item_id)

    for endpoint in (get_item, update_item, delete_item):
        endpoint.__annotations__["item_id"] = _id_annotation(id_pattern)
    for endpoint in (create_item, update_item):
        endpoint.__annotations__["payload"] = edit_schema

    list_items.__name__ = f"list_{name_lower}s"
    get_item.__name__ = f"get_{name_lower}"
    create_item.__name__ = f"create_{name_lower}"
    update_item.__name__ = f"update_{name_lower}"
    delete_item.__name__ = f"delete_{name_lower}"

    _add_collection_route(
        router,
        list_items,
        methods=["GET"],
        response_model=PageResult[response_schema],
        responses={**_NOT_FOUND, **_INVALID},
        name=f"list_{name_lower}s",
    )
    _add_collection_route(
        router,
        create_item,
        methods=["POST"],
        response_model=response_schema,
        status_code=HTTP_201_CREATED,
        responses={**_NOT_FOUND, **_INVALID},
        name=f"create_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        get_item,
        methods=["GET"],
        response_model=response_schema,
        responses=_NOT_FOUND,
        name=f"get_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        update_item,
        methods=["PUT"],
        response_model=response_schema,
        responses={**_NOT_FOUND, **_INVALID},
        name=f"update_{name_lower}",
    )
    router.add_api_route(
        "/{item_id}",
        delete_item,
        methods=["DELETE"],
        status_code=HTTP_204_NO_CONTENT,
        responses=_NOT_FOUND,
        name=f"delete_{name_lower}",
    )

    return router
