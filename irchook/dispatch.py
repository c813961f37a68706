"""Webhook dispatch — render capture groups into POST requests and send them.

Every capture-group set handed to publish() becomes one concurrent task.
publish() waits for all of them, but a failure in one request is only
logged (and reported to on_result); it never reaches the caller or stops
sibling requests. Requests are attempted exactly once.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

import httpx

from .errors import describe_dispatch_error
from .templating import render_headers, render_template

logger = logging.getLogger("irchook.dispatch")


@dataclass(frozen=True)
class DispatchTarget:
    """Destination and templates shared read-only by all requests."""

    url: str
    body_template: str
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings) -> "DispatchTarget":
        return cls(
            url=str(settings.webhook_url),
            body_template=settings.body_template,
            headers=dict(settings.headers),
        )

    def render(self, params: Sequence[str]) -> tuple[str, dict[str, str]]:
        """Render (body, headers) for one capture-group set."""
        return (
            render_template(self.body_template, params),
            render_headers(self.headers, params),
        )


@dataclass
class DispatchResult:
    """Outcome of a single webhook request."""

    params: list[str]
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


class WebhookPublisher:
    """POSTs rendered capture groups to the webhook target."""

    def __init__(
        self,
        target: DispatchTarget,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        on_result: Optional[Callable[[DispatchResult], None]] = None,
    ):
        self.target = target
        self.on_result = on_result
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def publish(self, params: list[list[str]]) -> None:
        """Send one request per capture-group set and wait for all of them."""
        if not params:
            return
        tasks = [asyncio.create_task(self._send(p_set)) for p_set in params]
        await asyncio.gather(*tasks)

    async def _send(self, p_set: list[str]) -> DispatchResult:
        logger.debug(f"Building POST body from params {p_set!r}")
        body, headers = self.target.render(p_set)
        logger.debug(f"POST body: {body!r}")

        result = DispatchResult(params=list(p_set))
        try:
            response = await self._client.post(self.target.url, content=body, headers=headers)
            result.status_code = response.status_code
            response.raise_for_status()
            logger.info(f"Webhook delivered (HTTP {response.status_code}) for {p_set[0]!r}")
        except httpx.HTTPStatusError as e:
            result.error = describe_dispatch_error(e)
            logger.warning(f"{result.error} Match: {p_set[0]!r}")
        except httpx.HTTPError as e:
            result.error = describe_dispatch_error(e)
            logger.error(f"{result.error} Match: {p_set[0]!r}")
        except Exception as e:
            result.error = describe_dispatch_error(e)
            logger.error(f"{result.error} Match: {p_set[0]!r}", exc_info=True)

        if self.on_result:
            try:
                self.on_result(result)
            except Exception as e:
                logger.error(f"on_result callback failed: {e}", exc_info=True)
        return result

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
