"""Toggl Track service.

Sums the hours tracked against a book title. One upstream call per
request: no cache and no retries.
"""

import base64
import calendar
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from coverly_api.config import Settings, settings as default_settings
from coverly_api.errors import ErrorKind, GatewayError, to_gateway_error
from coverly_api.protocols import UpstreamFetcher
from coverly_api.repositories import UpstreamClient
from coverly_api.tls import build_tls_trust

logger = logging.getLogger(__name__)

TIME_TRACKING_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNAUTHORIZED: "Invalid Toggl Track credentials.",
    ErrorKind.OVERLOADED: "Toggl Track rate limit reached. Try again in a moment.",
    ErrorKind.MISCONFIGURED: "Toggl Track workspace not found.",
    ErrorKind.BAD_REQUEST: "Invalid query sent to Toggl Track ({status}).",
    ErrorKind.TLS_VALIDATION_FAILED: (
        "SSL certificate validation failed for Toggl Track. "
        "Supply the proxy CA bundle with TOGGL_CA_FILE or TOGGL_CA_CERT, "
        "or set TOGGL_REJECT_UNAUTHORIZED=false to disable verification."
    ),
    ErrorKind.UNKNOWN: "Could not query Toggl Track.",
}


def months_before(moment: datetime, months: int) -> datetime:
    """Shift ``moment`` back by whole calendar months, clamping the day.

    Example: 2024-03-31 minus 1 month is 2024-02-29.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimeTrackingService:
    """Reads time entries from Toggl Track and aggregates them per book title.

    Example:
        ```python
        toggl = TimeTrackingService.create()
        hours = await toggl.find_book_hours("The Hobbit")
        ```
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        api_token: str | None,
        workspace_id: str | None,
        project_id: str | None = None,
        lookback_months: int = 6,
        api_url: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the time tracking service.

        Args:
            fetcher: HTTP client for Toggl Track (required).
            api_token: Toggl API token. Missing tokens fail each request.
            workspace_id: Toggl workspace id. Missing ids fail each request.
            project_id: Optional project filter.
            lookback_months: How far back to read entries (minimum 1).
            api_url: Toggl API base URL. Defaults to settings.
            clock: Returns the current aware datetime, replaceable in tests.
        """
        self._fetcher = fetcher
        self._api_token = api_token
        self._workspace_id = workspace_id
        self._project_id = project_id
        self._lookback_months = max(1, lookback_months)
        self._api_url = (api_url or default_settings.toggl_api_url).rstrip("/")
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, settings: Settings | None = None) -> "TimeTrackingService":
        """Factory method wiring the service from configuration."""
        settings = settings or default_settings
        tls = build_tls_trust(
            reject_unauthorized=settings.toggl_reject_unauthorized,
            ca_file=settings.toggl_ca_file,
            ca_cert=settings.toggl_ca_cert,
            label="Toggl Track",
        )
        return cls(
            fetcher=UpstreamClient.create(tls=tls, timeout=settings.toggl_timeout, name="Toggl Track"),
            api_token=settings.toggl_api_token,
            workspace_id=settings.toggl_workspace_id,
            project_id=settings.toggl_project_id,
            lookback_months=settings.toggl_lookback_months,
            api_url=settings.toggl_api_url,
        )

    def _authorization(self) -> str:
        token = base64.b64encode(f"{self._api_token}:api_token".encode()).decode("ascii")
        return f"Basic {token}"

    def _params(self, now: datetime) -> dict[str, str]:
        params = {
            "start_date": _isoformat(months_before(now, self._lookback_months)),
            "end_date": _isoformat(now),
            "workspace_id": str(self._workspace_id),
        }
        if self._project_id:
            params["project_ids"] = str(self._project_id)
        return params

    async def find_book_hours(self, title: str) -> float:
        """Sum the hours of entries whose description mentions ``title``.

        Matching is case-insensitive on the trimmed title. A running entry
        (negative duration) counts the time elapsed since it started.

        Args:
            title: Book title to look for

        Returns:
            Tracked hours, rounded to two decimals

        Raises:
            GatewayError: MISCONFIGURED without credentials, or the
                classified upstream failure
        """
        if not self._api_token or not self._workspace_id:
            logger.error("Toggl credentials are not configured (TOGGL_API_TOKEN / TOGGL_WORKSPACE_ID).")
            raise GatewayError(
                ErrorKind.MISCONFIGURED,
                "Toggl Track integration is not configured. "
                "Check the TOGGL_API_TOKEN and TOGGL_WORKSPACE_ID variables.",
            )

        now = self._clock()
        try:
            entries = await self._fetcher.get_json(
                f"{self._api_url}/me/time_entries",
                params=self._params(now),
                headers={"Authorization": self._authorization()},
            )
        except Exception as e:
            error = self._classify(e)
            logger.error('Failed to retrieve Toggl Track entries for title "%s"', title, exc_info=e)
            raise error from e

        total_seconds = self._sum_matching(entries, title, now)
        return round(total_seconds / 3600, 2)

    @staticmethod
    def _classify(exc: Exception) -> GatewayError:
        error = to_gateway_error(exc, TIME_TRACKING_MESSAGES)
        if error.upstream_status == 404:
            return GatewayError(ErrorKind.MISCONFIGURED, TIME_TRACKING_MESSAGES[ErrorKind.MISCONFIGURED], 404)
        if error.kind is ErrorKind.BAD_REQUEST:
            details = getattr(exc, "body", None) or "{}"
            return GatewayError(error.kind, f"{error.message} Details: {details}", error.upstream_status)
        if error.kind not in TIME_TRACKING_MESSAGES:
            return GatewayError(ErrorKind.UNKNOWN, TIME_TRACKING_MESSAGES[ErrorKind.UNKNOWN], error.upstream_status)
        return error

    @staticmethod
    def _sum_matching(entries: Any, title: str, now: datetime) -> float:
        normalized_title = title.strip().lower()
        now_seconds = int(now.timestamp())
        total: float = 0

        for entry in entries if isinstance(entries, list) else []:
            if not isinstance(entry, dict):
                continue
            description = entry.get("description")
            if not isinstance(description, str) or normalized_title not in description.lower():
                continue

            duration = entry.get("duration")
            if isinstance(duration, bool) or not isinstance(duration, (int, float)):
                continue
            # Running entries store -start_timestamp
            total += duration if duration >= 0 else max(0, now_seconds + duration)

        return total

    async def close(self) -> None:
        """Release the upstream client's connections."""
        await self._fetcher.close()
