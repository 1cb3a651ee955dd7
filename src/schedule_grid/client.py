"""REST client for the scheduling API.

Fetches schedule, section and room records from the external API server.
HTTP failures are classified into the errors hierarchy so that tenacity
retries transient failures and fails fast on permanent ones.
"""

import json
from pathlib import Path
from typing import Any

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.schedule_grid.errors import (
    AuthenticationError,
    NotFoundError,
    PermanentError,
    RateLimitError,
    TransientError,
)
from src.schedule_grid.logging import get_logger
from src.schedule_grid.models import ScheduleEntry
from src.schedule_grid.normalize import coerce_entry

logger = get_logger(__name__)

SCHEDULE_FILTERS = ("course", "year", "section", "instructor", "room")

# Envelope keys used by the different list endpoints
_LIST_KEYS = ("schedules", "data", "rooms", "sections")


def unwrap_list(payload: Any) -> list[Any]:
    """Extract the record list from a bare array or a known envelope.

    Raises:
        PermanentError: If the payload holds no list of records.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    raise PermanentError(f"Unexpected payload shape: {type(payload).__name__}")


def to_entries(records: list[Any]) -> list[ScheduleEntry]:
    """Validate records, skipping the ones that are not schedule-shaped."""
    entries = []
    for record in records:
        entry = coerce_entry(record)
        if entry is not None:
            entries.append(entry)
    skipped = len(records) - len(entries)
    if skipped:
        logger.warning("schedules_skipped", skipped=skipped, total=len(records))
    return entries


def load_schedules_file(path: str | Path) -> list[ScheduleEntry]:
    """Load schedules from a JSON export using the same payload shapes as the API."""
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    entries = to_entries(unwrap_list(payload))
    logger.info("schedules_loaded", path=str(path), count=len(entries))
    return entries


class ScheduleClient:
    """Thin wrapper over the scheduling API with bearer auth and retries."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize ScheduleClient.

        Args:
            base_url: API root, e.g. http://localhost:5000.
            token: Bearer token sent as the Authorization header.
            timeout: Per-request timeout in seconds.
            session: Optional pre-configured requests session.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, max=8),
        retry=retry_if_exception_type(TransientError),
        reraise=True,
    )
    def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a JSON document, classifying failures.

        Raises:
            AuthenticationError: 401 or 403.
            NotFoundError: 404.
            RateLimitError: 429 (retried).
            TransientError: Timeouts, connection errors and 5xx (retried).
            PermanentError: Other 4xx or a body that is not JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning("api_timeout", url=url, error=str(e))
            raise TransientError(f"Request to {path} timed out: {e}") from e
        except requests.ConnectionError as e:
            logger.warning("api_connection_error", url=url, error=str(e))
            raise TransientError(f"Could not reach {path}: {e}") from e

        status = resp.status_code
        if status in (401, 403):
            logger.error("api_auth_failed", url=url, status=status)
            raise AuthenticationError(f"{path}: not authorized ({status})")
        if status == 404:
            raise NotFoundError(f"{path}: not found")
        if status == 429:
            logger.warning("api_rate_limited", url=url)
            raise RateLimitError(f"{path}: rate limited")
        if status >= 500:
            logger.warning("api_server_error", url=url, status=status)
            raise TransientError(f"{path}: server error ({status})")
        if status >= 400:
            raise PermanentError(f"{path}: request rejected ({status}) {resp.text[:200]}")

        try:
            return resp.json()
        except ValueError as e:
            raise PermanentError(f"{path}: response is not JSON") from e

    def fetch_schedules(self, **filters: str | None) -> list[ScheduleEntry]:
        """Fetch schedules, optionally filtered by course, year, section, instructor or room."""
        unknown = set(filters) - set(SCHEDULE_FILTERS)
        if unknown:
            raise ValueError(f"Unknown schedule filters {sorted(unknown)}. Valid: {list(SCHEDULE_FILTERS)}")
        params = {key: value for key, value in filters.items() if value}
        entries = to_entries(unwrap_list(self._get("/api/schedule", params=params)))
        logger.info("schedules_fetched", count=len(entries), **params)
        return entries

    def fetch_sections(self, course: str, year: str) -> list[str]:
        """Active section names for a course/year, sorted, for grid column headers."""
        records = unwrap_list(self._get("/api/sections", params={"course": course, "year": year}))
        names = {
            r["name"]
            for r in records
            if isinstance(r, dict) and r.get("name") and not r.get("archived")
        }
        return sorted(names)

    def fetch_rooms(self) -> list[str]:
        """Room names, sorted, archived rooms excluded."""
        records = unwrap_list(self._get("/api/rooms"))
        names = {
            r.get("room") or r.get("name")
            for r in records
            if isinstance(r, dict) and (r.get("room") or r.get("name")) and not r.get("archived")
        }
        return sorted(names)
