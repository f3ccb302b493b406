"""REST client for the dashboard backend."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import httpx

from pulseboard.ingest import DOMAINS, Domain
from pulseboard.ingest.models import CampaignConversion, HealthStatus, OverviewMetrics, RevenueDataPoint
from pulseboard.ingest.results import ErrorKind, FetchResult, Ok, PermanentFailure, TransientFailure
from pulseboard.utils.dates import format_timestamp, now_in_tz

logger = logging.getLogger(__name__)

API_BASE_URL = os.environ.get("DASHBOARD_API_URL", "http://localhost:8080/api/v1")
API_TIMEOUT = float(os.environ.get("API_TIMEOUT_SECONDS", 10.0))

RECORD_TYPES = {
    Domain.OVERVIEW_LATEST: OverviewMetrics,
    Domain.OVERVIEW_ALL: OverviewMetrics,
    Domain.CAMPAIGNS: CampaignConversion,
    Domain.REVENUE: RevenueDataPoint,
    Domain.HEALTH: HealthStatus,
}

WRITABLE = {Domain.OVERVIEW_ALL, Domain.CAMPAIGNS, Domain.REVENUE}


class DashboardClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self._session = session or httpx.AsyncClient(
            timeout=timeout or API_TIMEOUT,
            headers={"Content-Type": "application/json", "User-Agent": "Pulseboard/1.0"},
        )

    async def close(self) -> None:
        await self._session.aclose()

    async def fetch(self, domain: Domain) -> FetchResult:
        result = await self._request("GET", DOMAINS[domain].path)
        if not isinstance(result, Ok):
            return result
        return _decode(domain, result.value)

    async def create(self, domain: Domain, body: Mapping[str, Any]) -> FetchResult:
        """POST a new record; the result always carries a complete record on success."""
        if domain not in WRITABLE:
            raise ValueError(f"Domain {domain.value} does not accept writes")
        result = await self._request("POST", DOMAINS[domain].path, json=dict(body))
        if not isinstance(result, Ok):
            return result
        payload = result.value
        if not isinstance(payload, Mapping):
            return PermanentFailure(ErrorKind.MALFORMED, f"Unexpected create response: {payload!r}")
        # The backend may answer with just {"message", "id"}.
        echoed = {key: value for key, value in payload.items() if key != "message"}
        merged = {"date": format_timestamp(now_in_tz()), **body, **echoed}
        try:
            return Ok(RECORD_TYPES[domain].from_payload(merged))
        except (TypeError, ValueError) as exc:
            return PermanentFailure(ErrorKind.MALFORMED, str(exc))

    async def _request(self, method: str, path: str, *, json: Any = None) -> FetchResult:
        url = f"{self.base_url}{path}"
        try:
            response = await self._session.request(method, url, json=json)
        except httpx.TimeoutException as exc:
            logger.info("%s %s timed out", method, url)
            return TransientFailure(ErrorKind.TIMEOUT, str(exc) or "timeout")
        except httpx.TransportError as exc:
            logger.info("%s %s unreachable: %s", method, url, exc)
            return TransientFailure(ErrorKind.NETWORK, str(exc) or exc.__class__.__name__)
        status = response.status_code
        if status >= 500:
            return TransientFailure(ErrorKind.SERVER, f"HTTP {status}", status)
        if status >= 400:
            return PermanentFailure(ErrorKind.CLIENT, _error_message(response), status)
        try:
            return Ok(response.json())
        except ValueError:
            return PermanentFailure(ErrorKind.MALFORMED, f"Invalid JSON from {url}", status)


def _decode(domain: Domain, payload: Any) -> FetchResult:
    record_type = RECORD_TYPES[domain]
    try:
        if DOMAINS[domain].many:
            # Go's encoder writes an empty slice as null.
            if payload is None:
                return Ok([])
            if not isinstance(payload, list):
                raise TypeError(f"expected a list, got {type(payload).__name__}")
            for item in payload:
                if not isinstance(item, Mapping):
                    raise TypeError(f"expected an object per item, got {type(item).__name__}")
            return Ok([record_type.from_payload(item) for item in payload])
        if not isinstance(payload, Mapping):
            raise TypeError(f"expected an object, got {type(payload).__name__}")
        return Ok(record_type.from_payload(payload))
    except (TypeError, ValueError) as exc:
        logger.warning("Malformed %s payload: %s", domain.value, exc)
        return PermanentFailure(ErrorKind.MALFORMED, str(exc))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, Mapping) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"
