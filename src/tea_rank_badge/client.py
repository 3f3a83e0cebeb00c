"""HTTP client for the tea registry API.

All requests go through :meth:`RegistryClient._get_json`, a single retry
loop driven by :func:`classify_response`:

* ``429``: wait ``Retry-After`` seconds (or ``2**attempt``) and retry.
* ``5xx``: wait ``2**attempt`` seconds plus up to one second of jitter
  and retry.
* any other non-2xx status fails at once.

Rate limits and server errors share the ``max_retries`` budget of one
logical call. Each attempt gets one ``timeout_ms`` deadline covering
connect, headers and body. Timeouts and connection errors are never
retried.
"""

from __future__ import annotations

import json
import logging
import random
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from tea_rank_badge import __version__
from tea_rank_badge.config import RegistryConfig
from tea_rank_badge.errors import (
    HttpError,
    RegistryConnectionError,
    RegistryTimeoutError,
    SchemaError,
)
from tea_rank_badge.models import ProjectRecord, SearchResponse
from tea_rank_badge.output import Log

logger = logging.getLogger(__name__)

USER_AGENT = f"tea-rank-badge/{__version__} (+https://github.com/cryptoflops/tea-rank-badge)"

# Same set of characters JavaScript's encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "!'()*"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _retry_after_seconds(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        seconds = float(raw.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def classify_response(response: httpx.Response, attempt: int) -> float | None:
    """Return how long to wait before retrying ``response``, or None to fail.

    ``attempt`` is the number of retries already made for this call.
    """
    status = response.status_code
    if status == 429:
        retry_after = _retry_after_seconds(response)
        return retry_after if retry_after is not None else float(2**attempt)
    if status >= 500:
        return 2**attempt + random.random()
    return None


class RegistryClient:
    """Resolve tea projects by id or name."""

    def __init__(
        self,
        config: RegistryConfig,
        log: Log,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._log = log
        self._sleep = sleep
        self._http = httpx.Client(
            timeout=httpx.Timeout(config.timeout_ms / 1000),
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            transport=transport,
        )

    def __enter__(self) -> RegistryClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # -- public API --------------------------------------------------------

    def search_by_name(self, name: str) -> ProjectRecord | None:
        """Find a project by name and return its full record.

        Returns None when the search has no hits.
        """
        url = f"{self._config.base_url}projects/search?text={encode_component(name)}"
        results = self._validate(SearchResponse, self._get_json(url))

        if not results.projects:
            self._log.warn(f'No projects found matching "{name}"')
            return None

        wanted = name.lower()
        for project in results.projects:
            if project.name.lower() == wanted:
                return self.get_by_id(project.project_id)

        if len(results.projects) > 1:
            self._log.warn(f'Multiple projects found matching "{name}":')
            for project in results.projects:
                self._log.warn(f"  - {project.name} (ID: {project.project_id})")
            self._log.info("Using first result. Specify --project-id for exact match.")

        return self.get_by_id(results.projects[0].project_id)

    def get_by_id(self, project_id: str) -> ProjectRecord:
        """Fetch and validate the full record for ``project_id``."""
        url = f"{self._config.base_url}projects/info?id={encode_component(project_id)}"
        return self._validate(ProjectRecord, self._get_json(url))

    # -- transport ---------------------------------------------------------

    def _send(self, url: str) -> tuple[httpx.Response, bytes]:
        """GET ``url`` and read its body, all within one ``timeout_ms`` budget.

        httpx bounds each connect or read step; the overall deadline is
        checked after every body chunk.
        """
        timeout_ms = self._config.timeout_ms
        deadline = time.monotonic() + timeout_ms / 1000
        try:
            with self._http.stream("GET", url) as response:
                body = bytearray()
                for chunk in response.iter_bytes():
                    body.extend(chunk)
                    if time.monotonic() > deadline:
                        raise RegistryTimeoutError(timeout_ms)
                if time.monotonic() > deadline:
                    raise RegistryTimeoutError(timeout_ms)
                return response, bytes(body)
        except httpx.TimeoutException as exc:
            raise RegistryTimeoutError(timeout_ms) from exc
        except httpx.TransportError as exc:
            raise RegistryConnectionError(f"Could not reach {url}: {exc}") from exc

    def _get_json(self, url: str) -> Any:
        attempt = 0
        while True:
            self._log.debug(f"Fetching: {url}")
            response, body = self._send(url)
            logger.debug("GET %s -> %d", url, response.status_code)

            if response.is_success:
                break

            delay = classify_response(response, attempt)
            if delay is None or attempt >= self._config.max_retries:
                raise HttpError(response.status_code, response.reason_phrase)

            if response.status_code == 429:
                self._log.warn(f"Rate limited. Retrying after {delay * 1000:.0f}ms...")
            else:
                self._log.warn(
                    f"Server error ({response.status_code}). "
                    f"Retrying after {delay * 1000:.0f}ms..."
                )
            self._sleep(delay)
            attempt += 1

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise SchemaError(f"Response from {url} is not valid JSON: {exc}") from exc
        self._log.debug("Response received", data)
        return data

    @staticmethod
    def _validate(model: type[BaseModel], data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise SchemaError(f"Unexpected {model.__name__} shape: {exc}") from exc
