"""Retrying HTTP request executor.

Each call opens its own ``httpx.AsyncClient`` and closes it when done;
nothing is pooled across calls.  Connection resets, broken pipes and
timeouts are retried with linear backoff::

    wait before attempt n (n >= 2) = base_delay * n + uniform(0, base_delay)

Replies must be JSON.  A JSON object carrying an ``error`` field is the
engine reporting a failure and is raised as :class:`EngineError` without
retrying.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from searchsync.config.settings import RetryPolicy
from searchsync.exceptions import EngineError, MalformedReplyError, TransportError
from searchsync.models.connection import Credentials

logger = logging.getLogger(__name__)

# Reset / broken pipe / timeout once a connection exists.  ConnectError is
# left out: a refused or unreachable host fails on the first attempt.
TRANSIENT_ERRORS: tuple[type[httpx.HTTPError], ...] = (
    httpx.TimeoutException,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)

DEFAULT_TIMEOUT = 30.0


class RequestSpec(BaseModel):
    """One logical request to the search engine."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(description="HTTP method")
    url: str = Field(description="Absolute target URL")
    body: str | None = Field(default=None, description="Serialized JSON body")
    auth: Credentials | None = Field(default=None, description="Optional basic-auth credentials")

    @classmethod
    def with_json(
        cls,
        method: str,
        url: str,
        payload: Any = None,
        auth: Credentials | None = None,
    ) -> RequestSpec:
        """Build a request, serializing ``payload`` to JSON when given."""
        body = json.dumps(payload) if payload is not None else None
        return cls(method=method, url=url, body=body, auth=auth)


class EngineReply(BaseModel):
    """A successfully parsed search engine reply."""

    status_code: int = Field(description="HTTP status code")
    body: Any = Field(description="Parsed JSON body")
    attempts: int = Field(ge=1, description="Attempts used, including the successful one")


async def execute(
    spec: RequestSpec,
    *,
    retry: RetryPolicy | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> EngineReply:
    """Send ``spec`` and return the parsed reply.

    Args:
        spec: The request to send.
        retry: Backoff policy. Defaults to 3 attempts, 500ms steps.
        timeout: Per-attempt timeout in seconds.
        transport: Optional ``httpx`` transport (tests use ``MockTransport``).

    Returns:
        The parsed reply and the number of attempts it took.

    Raises:
        TransportError: The request failed at the network level, either
            permanently or on every allowed attempt.
        MalformedReplyError: The reply body is not valid JSON.
        EngineError: The reply carries an ``error`` field.
    """
    policy = retry or RetryPolicy()
    response, attempts = await _send_with_retry(spec, policy, timeout, transport)

    try:
        body = response.json()
    except ValueError as e:
        raise MalformedReplyError(
            f"Search engine did not send back a valid JSON reply: {response.text!r}",
            raw_body=response.text,
            request=spec,
        ) from e

    if isinstance(body, dict) and body.get("error"):
        raise EngineError(
            f"Search engine reported an error: {body['error']!r}",
            error=body["error"],
            status_code=response.status_code,
            request=spec,
        )

    return EngineReply(status_code=response.status_code, body=body, attempts=attempts)


async def _send_with_retry(
    spec: RequestSpec,
    policy: RetryPolicy,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> tuple[httpx.Response, int]:
    attempts = 0
    while True:
        attempts += 1
        try:
            response = await _send_once(spec, timeout, transport)
        except TRANSIENT_ERRORS as e:
            if attempts >= policy.max_attempts:
                raise TransportError(
                    f"Search engine request failed after {attempts} attempts: {e!r}",
                    attempts=attempts,
                    request=spec,
                ) from e
            wait = policy.delay_before(attempts + 1)
            logger.warning(
                "%s %s failed (%s), retrying in %.2fs (attempt %d/%d)",
                spec.method,
                spec.url,
                type(e).__name__,
                wait,
                attempts + 1,
                policy.max_attempts,
            )
            await asyncio.sleep(wait)
        except httpx.HTTPError as e:
            raise TransportError(
                f"Search engine request error: {e!r}",
                attempts=attempts,
                request=spec,
            ) from e
        else:
            return response, attempts


async def _send_once(
    spec: RequestSpec,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.Response:
    auth = httpx.BasicAuth(spec.auth.user, spec.auth.password) if spec.auth else None
    headers = {"Content-Type": "application/json"} if spec.body is not None else None

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout), auth=auth, transport=transport) as client:
        return await client.request(spec.method, spec.url, content=spec.body, headers=headers)
