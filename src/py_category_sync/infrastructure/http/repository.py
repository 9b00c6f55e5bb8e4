"""HTTP adapter for the remote category store (httpx).

Implements the ``CategoryRepository`` port. Every method returns ``Ok | Err``;
transport errors, non-success statuses and unparsable bodies never escape as
exceptions.

Transport retries: GET requests are retried on transport errors and 5xx
responses with exponential backoff (``API_RETRY_*`` settings). Writes are sent
once.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from py_category_sync.application.results import CreateOutcome, Err, FailureKind, Ok, Result
from py_category_sync.domain.categories import (
    CanonicalCategoryDefinition,
    CategoryKind,
    UserCategory,
    definition_errors,
)
from py_category_sync.infrastructure.config.settings import BaseAppSettings
from py_category_sync.infrastructure.http.schemas import (
    UPDATE_FIELD_ALIASES,
    CategoryWire,
    EnvelopeWire,
    definition_payload,
)

logger = logging.getLogger(__name__)

__all__ = ["HttpCategoryRepository", "is_duplicate_response"]

CATEGORIES_PATH = "/categories"
RESTORE_DEFAULTS_PATH = "/categories/recriar-padroes"

_DUPLICATE_MARKERS = ("already exists", "já existe", "ja existe", "duplicate")


def is_duplicate_response(status: int | None, message: str | None) -> bool:
    """True when a failed create means "this category already exists".

    409 always counts; otherwise the message must carry a known duplicate
    marker. Server errors (5xx) and transport failures never count.
    """
    if status == 409:
        return True
    if status is None or status >= 500:
        return False
    text = (message or "").casefold()
    return any(marker in text for marker in _DUPLICATE_MARKERS)


class HttpCategoryRepository:
    """CategoryRepository over the store's REST API.

    Parameters:
        base_url: API root, e.g. ``https://api.example.com/api``.
        token: Optional bearer token.
        timeout: Per-request timeout in seconds.
        retry_attempts: Total GET attempts (>= 1).
        retry_backoff_ms / retry_max_backoff_ms: Exponential backoff base and cap.
        client: Pre-built AsyncClient (its base_url/headers are used as-is).
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_backoff_ms: int = 50,
        retry_max_backoff_ms: int = 1000,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._retry_attempts = max(1, retry_attempts)
        self._backoff_ms = max(1, retry_backoff_ms)
        self._max_backoff_ms = max(self._backoff_ms, retry_max_backoff_ms)
        self._owns_client = client is None
        if client is None:
            headers = {"Accept": "application/json"}
            if token:
                headers["Authorization"] = f"Bearer {token}"
            client = httpx.AsyncClient(
                base_url=base_url.rstrip("/"),
                headers=headers,
                timeout=timeout,
                transport=transport,
            )
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: BaseAppSettings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> HttpCategoryRepository:
        return cls(
            settings.api_base_url,
            token=settings.api_token,
            timeout=settings.api_timeout_sec,
            retry_attempts=settings.api_retry_attempts,
            retry_backoff_ms=settings.api_retry_backoff_ms,
            retry_max_backoff_ms=settings.api_retry_max_backoff_ms,
            transport=transport,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpCategoryRepository:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- port methods ---
    async def list(self, kind: CategoryKind | None = None) -> Result[list[UserCategory]]:
        params = {"tipo": kind.wire} if kind is not None else None
        result = await self._call("GET", CATEGORIES_PATH, params=params)
        if isinstance(result, Err):
            return result
        rows = result.value
        if not isinstance(rows, list):
            return Err("category list response is not a list", FailureKind.PROTOCOL)
        categories: list[UserCategory] = []
        for raw in rows:
            try:
                categories.append(CategoryWire.model_validate(raw).to_domain())
            except PydanticValidationError as exc:
                logger.warning("Skipping malformed category row: %s", exc.errors(include_url=False))
        return Ok(categories)

    async def create(self, definition: CanonicalCategoryDefinition) -> Result[CreateOutcome]:
        errors = definition_errors(definition)
        if errors:
            return Err(f"invalid category {definition.name!r}: " + "; ".join(errors), FailureKind.INVALID)
        result = await self._call("POST", CATEGORIES_PATH, json=definition_payload(definition))
        if isinstance(result, Err):
            if is_duplicate_response(result.status, result.reason):
                return Ok(CreateOutcome(None, already_existed=True))
            return result
        try:
            created = CategoryWire.model_validate(result.value).to_domain()
        except PydanticValidationError:
            return Err(f"unexpected create response for {definition.name!r}", FailureKind.PROTOCOL)
        return Ok(CreateOutcome(created))

    async def update(self, category_id: str, changes: Mapping[str, Any]) -> Result[UserCategory]:
        unknown = sorted(set(changes) - set(UPDATE_FIELD_ALIASES))
        if unknown:
            return Err(f"unsupported fields: {', '.join(unknown)}", FailureKind.INVALID)
        body = {UPDATE_FIELD_ALIASES[k]: v for k, v in changes.items()}
        result = await self._call("PUT", f"{CATEGORIES_PATH}/{category_id}", json=body)
        if isinstance(result, Err):
            return result
        try:
            return Ok(CategoryWire.model_validate(result.value).to_domain())
        except PydanticValidationError:
            return Err("unexpected update response", FailureKind.PROTOCOL)

    async def delete(self, category_id: str) -> Result[None]:
        result = await self._call("DELETE", f"{CATEGORIES_PATH}/{category_id}")
        if isinstance(result, Err):
            return result
        return Ok(None)

    async def restore_defaults(self) -> Result[int]:
        result = await self._call("POST", RESTORE_DEFAULTS_PATH)
        if isinstance(result, Err):
            return result
        data = result.value
        return Ok(len(data) if isinstance(data, list) else 0)

    # --- transport ---
    async def _call(self, method: str, path: str, **kwargs: Any) -> Result[Any]:
        try:
            response = await self._send(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return Err(f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__, FailureKind.NETWORK)
        return self._unwrap(method, path, response)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request; GETs are retried on transport errors and 5xx."""
        attempts = self._retry_attempts if method == "GET" else 1
        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(method, path, **kwargs)
            except httpx.TransportError as exc:
                if attempt == attempts:
                    raise
                reason = type(exc).__name__
            else:
                if response.status_code < 500 or attempt == attempts:
                    return response
                reason = f"HTTP {response.status_code}"
            delay_ms = min(self._max_backoff_ms, self._backoff_ms * (2 ** (attempt - 1)))
            logger.warning(
                "%s %s: transient failure (attempt %s/%s, %s); retrying in %sms",
                method,
                path,
                attempt,
                attempts,
                reason,
                delay_ms,
            )
            await asyncio.sleep(delay_ms / 1000.0)
        raise AssertionError("unreachable")  # pragma: no cover

    @staticmethod
    def _unwrap(method: str, path: str, response: httpx.Response) -> Result[Any]:
        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None
            if response.is_success:
                return Err(f"{method} {path}: response is not JSON", FailureKind.PROTOCOL, response.status_code)

        envelope: EnvelopeWire | None = None
        if isinstance(body, dict) and ("success" in body or "data" in body or not response.is_success):
            try:
                envelope = EnvelopeWire.model_validate(body)
            except PydanticValidationError:
                envelope = None

        if not response.is_success:
            reason = (envelope.reason if envelope else None) or response.text or f"HTTP {response.status_code}"
            logger.debug("%s %s -> %s: %s", method, path, response.status_code, reason)
            return Err(reason, FailureKind.HTTP, response.status_code)
        if isinstance(body, list):
            return Ok(body)
        if envelope is None:
            return Ok(body)
        if not envelope.success:
            return Err(envelope.reason or "request failed", FailureKind.HTTP, response.status_code)
        return Ok(envelope.data)
