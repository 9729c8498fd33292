"""AnkiConnect JSON-RPC client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from ankibridge.adapters.http_resilience import ResilientClient
from ankibridge.domain.errors import ContentStoreError

from .schema import ActionResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from ankibridge.config.ankiconnect import AnkiConnectConfig
    from ankibridge.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

type Action = tuple[str, Mapping[str, object]]


class AnkiConnectUnavailableError(ContentStoreError):
    """Raised when AnkiConnect cannot be reached or answers with an HTTP error."""


class AnkiConnectAPIError(ContentStoreError):
    """Raised when an AnkiConnect action reports an error."""

    def __init__(self, action: str, message: str) -> None:
        self.action = action
        self.message = message
        super().__init__(f"AnkiConnect action {action!r} failed: {message}")


class AnkiConnectClient:
    """Low-level client for the AnkiConnect add-on.

    Every call is one POST of an ``{action, version, params}`` envelope. Nothing
    is cached and nothing is retried beyond what the transport retry policy in
    the resilience configuration allows.
    """

    def __init__(
        self,
        *,
        config: AnkiConnectConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def invoke(self, action: str, **params: object) -> object:
        return asyncio.run(self._invoke_async(action, params))

    def invoke_multi(self, actions: Sequence[Action]) -> list[object]:
        """Run several actions in one ``multi`` request, returning results in order."""

        if not actions:
            return []
        return asyncio.run(self._invoke_multi_async(actions))

    async def _invoke_async(self, action: str, params: Mapping[str, object]) -> object:
        async with self._client_factory(self._resilience) as client:
            envelope = await self._perform_request(client=client, action=action, params=params)
        return _unwrap(action, envelope)

    async def _invoke_multi_async(self, actions: Sequence[Action]) -> list[object]:
        inner = [
            {"action": name, "version": self._config.api_version, "params": dict(params)}
            for name, params in actions
        ]
        async with self._client_factory(self._resilience) as client:
            envelope = await self._perform_request(
                client=client,
                action="multi",
                params={"actions": inner},
            )
        results = _unwrap("multi", envelope)
        if not isinstance(results, list) or len(results) != len(actions):
            raise AnkiConnectAPIError("multi", "Unexpected result shape")

        unwrapped: list[object] = []
        for (name, _), item in zip(actions, results, strict=True):
            unwrapped.append(_unwrap(name, _validate_envelope(name, item)))
        return unwrapped

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        action: str,
        params: Mapping[str, object],
    ) -> ActionResponse:
        payload: dict[str, object] = {
            "action": action,
            "version": self._config.api_version,
            "params": dict(params),
        }
        if self._config.api_key is not None:
            payload["key"] = self._config.api_key

        log.debug("AnkiConnect request: %s", action)
        try:
            response = await client.post("", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise AnkiConnectUnavailableError(
                f"AnkiConnect at {self._config.url} is unavailable ({action}): {exc}"
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise AnkiConnectAPIError(action, "Response is not valid JSON") from exc
        return _validate_envelope(action, body)


def _validate_envelope(action: str, body: object) -> ActionResponse:
    if not isinstance(body, dict):
        raise AnkiConnectAPIError(action, "Unexpected response payload")
    try:
        return ActionResponse.model_validate(body)
    except ValidationError as exc:
        raise AnkiConnectAPIError(action, "Malformed response envelope") from exc


def _unwrap(action: str, envelope: ActionResponse) -> object:
    if envelope.error is not None:
        raise AnkiConnectAPIError(action, envelope.error)
    return envelope.result
