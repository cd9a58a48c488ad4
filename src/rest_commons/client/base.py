"""One synchronous HTTP round trip and the interpretation of its answer.

    2xx  → body decoded by the caller-supplied decoder
    400  → ValidationFailure carrying the decoded ErrorResponse
    404  → NotFoundError (read operations turn it into an absent result)
    else → UpstreamFailure with the raw body

Transport errors (connection refused, timeouts ...) become UpstreamFailure.
Nothing is retried.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rest_commons.exceptions import DecodeError, NotFoundError, UpstreamFailure, ValidationFailure
from rest_commons.schemas.generic import ErrorResponse

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


def build_client(*, timeout: float = 30.0, headers: Mapping[str, str] | None = None) -> httpx.Client:
    """Create an ``httpx.Client`` with JSON defaults."""
    default_headers = {"Accept": JSON_CONTENT_TYPE}
    if headers:
        default_headers.update(headers)
    return httpx.Client(timeout=httpx.Timeout(timeout), headers=default_headers)


def serialize_body(body: BaseModel | Mapping[str, Any]) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    return dict(body)


class RestClient:
    """Thin wrapper around an ``httpx.Client`` shared by resource proxies.

    Holds no per-call state, so one instance may serve concurrent callers
    as far as the wrapped client allows.

    Args:
        client: Client to send requests with; built with ``timeout`` when omitted.
        timeout: Timeout in seconds for a client built here.
        language: Sent as ``Accept-Language`` on every request when set.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = 30.0,
        language: str | None = None,
    ) -> None:
        self._client = client if client is not None else build_client(timeout=timeout)
        self.language = language

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def exchange(
        self,
        method: str,
        url: str,
        *,
        params: Sequence[tuple[str, str]] | None = None,
        body: BaseModel | Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request and return the raw response, whatever its status."""
        headers = {}
        if self.language:
            headers["Accept-Language"] = self.language
        kwargs: dict[str, Any] = {"headers": headers}
        if params:
            kwargs["params"] = list(params)
        if body is not None:
            kwargs["json"] = serialize_body(body)
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise UpstreamFailure(str(exc), message=f"{method} {url} failed: {exc.__class__.__name__}") from exc

    def render(self, response: httpx.Response, decoder: Callable[[Any], T]) -> T:
        """Decode a 2xx body with ``decoder`` or raise the matching failure."""
        if not response.is_success:
            self.raise_for_status(response)
        try:
            body = response.json()
        except ValueError as exc:
            raise DecodeError(f"Response body is not JSON: {exc}") from None
        try:
            return decoder(body)
        except PydanticValidationError as exc:
            raise DecodeError(f"Response body does not match the expected shape: {exc}") from None

    def raise_for_status(self, response: httpx.Response) -> None:
        """Raise the failure matching a non-2xx ``response``."""
        if response.is_success:
            return
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise ValidationFailure(self._decode_error_response(response))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(message=f"{response.request.method} {response.request.url} not found")
        raise UpstreamFailure(response.text, status=response.status_code)

    @staticmethod
    def _decode_error_response(response: httpx.Response) -> ErrorResponse:
        try:
            return ErrorResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise DecodeError(f"Error body is not an ErrorResponse: {exc}") from None
