"""Read-only client for the Tangerino time-clock API.

Only GET requests are ever issued; the engine never writes to the time clock.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

import requests

from ..audit.repository import AuditLogRepository
from ..common.datetime_utils import millis_to_local_datetime
from ..core.constants import DEFAULT_MAX_PAGES, DEFAULT_PAGE_SIZE
from ..core.enums import AuditAction
from ..core.exceptions import SourceUnavailableError
from ..logging_config import get_logger
from .source import ExternalEmployee, PunchPair, PunchSource

logger = get_logger("ingestion.tangerino")


def _items(data: Any) -> list[dict]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("content", "data", "items"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def _pair_date(raw: Any, date_in: int) -> date:
    if isinstance(raw, str) and raw:
        return datetime.strptime(raw[:10], "%Y-%m-%d").date()
    if isinstance(raw, (int, float)):
        return millis_to_local_datetime(int(raw)).date()
    return millis_to_local_datetime(date_in).date()


def parse_punch_pair(item: dict) -> Optional[PunchPair]:
    """Map one API item to a PunchPair; None when it has no entry timestamp."""
    employee = item.get("employee") or {}
    external_id = item.get("employeeId") or employee.get("id")
    date_in = item.get("dateIn")
    if external_id is None or date_in is None:
        return None
    date_out = item.get("dateOut")
    return PunchPair(
        external_employee_id=str(external_id),
        employee_name=item.get("employeeName") or employee.get("name"),
        date=_pair_date(item.get("date"), int(date_in)),
        date_in=int(date_in),
        date_out=int(date_out) if date_out is not None else None,
    )


class TangerinoClient(PunchSource):
    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        company_id: str = "",
        page_size: int = DEFAULT_PAGE_SIZE,
        max_pages: int = DEFAULT_MAX_PAGES,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        audit: Optional[AuditLogRepository] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._company_id = company_id
        self._page_size = int(page_size)
        self._max_pages = max(1, int(max_pages))
        self._timeout = timeout
        self._session = session or requests.Session()
        self._audit = audit

    def _get(self, endpoint: str, params: dict) -> Any:
        if self._audit is not None:
            self._audit.append(AuditAction.API_READ, "tangerino", details={"method": "GET", "endpoint": endpoint})
        try:
            resp = self._session.get(
                f"{self._base_url}{endpoint}",
                params=params,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Accept": "application/json",
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as e:
            raise SourceUnavailableError(f"Tangerino GET {endpoint} failed: {e}") from e
        except ValueError as e:
            raise SourceUnavailableError(f"Tangerino GET {endpoint} returned invalid JSON") from e

    def _get_all_pages(self, endpoint: str, params: dict) -> Iterable[dict]:
        page = 0
        while True:
            data = self._get(endpoint, {**params, "page": page, "size": self._page_size})
            items = _items(data)
            yield from items

            total_pages = data.get("totalPages") if isinstance(data, dict) else None
            if total_pages is None or not items or page + 1 >= int(total_pages):
                return
            page += 1
            if page >= self._max_pages:
                logger.warning(
                    "page limit reached",
                    extra={"endpoint": endpoint, "max_pages": self._max_pages, "total_pages": total_pages},
                )
                return

    def _base_params(self) -> dict:
        return {"companyId": self._company_id} if self._company_id else {}

    def fetch_employees(self) -> Sequence[ExternalEmployee]:
        out = []
        for item in self._get_all_pages("/employee", self._base_params()):
            if item.get("id") is None:
                continue
            out.append(ExternalEmployee(external_id=str(item["id"]), name=str(item.get("name") or "")))
        return out

    def fetch_punches(self, start: date, end: date) -> Sequence[PunchPair]:
        params = {**self._base_params(), "startDate": start.isoformat(), "endDate": end.isoformat()}
        out = []
        for item in self._get_all_pages("/punch", params):
            pair = parse_punch_pair(item)
            if pair is not None:
                out.append(pair)
        return out
