"""Webhook provider: POSTs the prompt to the refinement workflow."""

import asyncio
import json
import logging
import re
import time
from typing import Any, Optional, Tuple

import httpx

from ..config import RefinerConfig
from ..deadline import Aborted, run_with_deadline
from ..errors import RefineErrorCode, RefinerError
from ..normalize import find_first_non_empty_string, normalize_output
from ..retry import calculate_backoff_delay, sleep
from ..validation import validate_url
from .base import BaseProvider

logger = logging.getLogger(__name__)

RESPONSE_FIELDS = ('output', 'refined', 'text', 'content')

_RATE_LIMIT_RE = re.compile(r'rate limit', re.IGNORECASE)
_EXCERPT_LENGTH = 500


def _excerpt(body: str) -> str:
    if len(body) > _EXCERPT_LENGTH:
        return body[:_EXCERPT_LENGTH] + '...'
    return body


def is_rate_limited(status: int, body: str) -> bool:
    return status == 429 or bool(_RATE_LIMIT_RE.search(body))


def extract_refined_prompt(body: str) -> str:
    """Pull the refined text out of a webhook response body.

    Raises:
        RefinerError: INVALID_RESPONSE or EMPTY_RESPONSE
    """
    if not body:
        raise RefinerError("Empty response from webhook", RefineErrorCode.EMPTY_RESPONSE)

    try:
        data: Any = json.loads(body)
    except (ValueError, RecursionError) as e:
        raise RefinerError(
            "Invalid JSON response from webhook", RefineErrorCode.INVALID_RESPONSE, e
        ) from e

    # Some workflows wrap the payload in a list
    if isinstance(data, list):
        data = data[0] if data else None

    if data is None or (not isinstance(data, (dict, list)) and not data):
        raise RefinerError(
            "Invalid response structure from webhook", RefineErrorCode.INVALID_RESPONSE
        )

    raw = None
    if isinstance(data, dict):
        for field in RESPONSE_FIELDS:
            if data.get(field) is not None:
                raw = data[field]
                break

    if raw is None:
        raw = find_first_non_empty_string(data)

    if raw is None:
        raise RefinerError("No usable output field in response", RefineErrorCode.INVALID_RESPONSE)

    refined = normalize_output(raw)
    if not refined.strip():
        raise RefinerError("Refined prompt is empty", RefineErrorCode.EMPTY_RESPONSE)

    return refined


class WebhookProvider(BaseProvider):
    """Provider for the remote refinement webhook"""

    def __init__(self, config: RefinerConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: Resolved webhook settings
            client: Shared HTTP client; a private one is opened per call if omitted
        """
        self.config = config
        self._client = client

    @property
    def name(self) -> str:
        return 'webhook'

    async def refine(self, prompt: str, cancel_event: Optional[asyncio.Event] = None) -> str:
        """Send the prompt and return the refined text.

        Setting ``cancel_event`` aborts the in-flight request the same way
        the timeout does.
        """
        if not validate_url(self.config.webhook_url):
            raise RefinerError(
                f"Invalid webhook URL: {self.config.webhook_url}", RefineErrorCode.NETWORK_ERROR
            )

        if self._client is not None:
            return await self._send(self._client, prompt, cancel_event)

        async with httpx.AsyncClient(timeout=None) as client:
            return await self._send(client, prompt, cancel_event)

    async def _post(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        cancel_event: Optional[asyncio.Event]
    ) -> Tuple[int, str]:
        """Issue one POST bounded by the configured timeout."""
        response = await run_with_deadline(
            client.post(
                self.config.webhook_url,
                json={'prompt': prompt},
                headers={'Content-Type': 'application/json'},
            ),
            self.config.timeout_ms,
            cancel_event,
        )
        return response.status_code, response.text

    async def _send(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        cancel_event: Optional[asyncio.Event]
    ) -> str:
        max_retries = self.config.max_retries
        start = time.monotonic()

        for attempt in range(max_retries + 1):
            logger.debug(
                "POST %s attempt=%d timeout_ms=%d",
                self.config.webhook_url, attempt + 1, self.config.timeout_ms
            )
            try:
                status, body = await self._post(client, prompt, cancel_event)
            except (Aborted, httpx.TimeoutException) as e:
                elapsed_ms = (time.monotonic() - start) * 1000
                logger.error(
                    "Webhook request aborted after %.0fms (timeout_ms=%d)",
                    elapsed_ms, self.config.timeout_ms
                )
                message = str(e) if isinstance(e, Aborted) else "Request timed out"
                raise RefinerError(message, RefineErrorCode.TIMEOUT, e) from e
            except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
                if attempt == max_retries:
                    raise RefinerError(
                        f"Network error: {e}", RefineErrorCode.NETWORK_ERROR, e
                    ) from e
                delay = calculate_backoff_delay(attempt, self.config.base_delay_ms)
                logger.warning("Network error (%s), retrying in %dms", e, delay)
                await sleep(delay)
                continue

            logger.debug(
                "Webhook responded status=%d after %.0fms",
                status, (time.monotonic() - start) * 1000
            )

            if is_rate_limited(status, body):
                if attempt == max_retries:
                    raise RefinerError(
                        f"Rate limited: {_excerpt(body) or status}",
                        RefineErrorCode.RATE_LIMITED
                    )
                delay = calculate_backoff_delay(attempt, self.config.base_delay_ms)
                logger.warning("Rate limited (status=%d), retrying in %dms", status, delay)
                await sleep(delay)
                continue

            if status < 200 or status >= 300:
                raise RefinerError(
                    f"Webhook error: {status} {_excerpt(body)}".rstrip(),
                    RefineErrorCode.WEBHOOK_ERROR
                )

            return extract_refined_prompt(body)

        raise RefinerError("Retry budget exhausted", RefineErrorCode.NETWORK_ERROR)


async def send_to_webhook(
    prompt: str,
    config: RefinerConfig,
    client: Optional[httpx.AsyncClient] = None,
    cancel_event: Optional[asyncio.Event] = None
) -> str:
    """Send a prompt to the webhook and return the refined result."""
    return await WebhookProvider(config, client=client).refine(prompt, cancel_event=cancel_event)
