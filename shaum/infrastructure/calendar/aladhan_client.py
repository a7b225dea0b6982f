"""
Aladhan Calendar Client
Fetches month calendars (Gregorian <-> Hijri) from api.aladhan.com

Failures surface as CalendarLookupError; callers decide on fallback.
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

import httpx

from shaum.domain.models import HijriDate
from shaum.exceptions import CalendarLookupError
from shaum.infrastructure.calendar.types import CalendarDay

logger = logging.getLogger(__name__)


class AladhanCalendarClient:
    """
    Aladhan calendar API client

    Endpoints:
    - gToHCalendar/{month}/{year}: Gregorian month -> Hijri dates
    - hToGCalendar/{month}/{year}: Hijri month -> Gregorian dates
    """

    DEFAULT_BASE_URL = "https://api.aladhan.com/v1"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def gregorian_to_hijri(self, month: int, year: int) -> List[CalendarDay]:
        """
        Hijri dates for every day of a Gregorian month

        Args:
            month: Gregorian month (1-12)
            year: Gregorian year
        """
        payload = await self._request_json(f"{self.base_url}/gToHCalendar/{month}/{year}", month, year)
        return self._parse_days(payload, month, year)

    async def hijri_to_gregorian(self, month: int, year: int) -> List[CalendarDay]:
        """
        Gregorian dates for every day of a Hijri month

        Args:
            month: Hijri month (1-12)
            year: Hijri year
        """
        payload = await self._request_json(f"{self.base_url}/hToGCalendar/{month}/{year}", month, year)
        return self._parse_days(payload, month, year)

    async def _request_json(self, url: str, month: int, year: int) -> Any:
        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise CalendarLookupError(f"Aladhan request failed: {exc}", month=month, year=year) from exc

        if response.status_code != 200:
            raise CalendarLookupError(
                f"Aladhan status {response.status_code} for {url}",
                month=month,
                year=year,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise CalendarLookupError(f"Aladhan returned non-JSON for {url}", month=month, year=year) from exc

        if not isinstance(payload, dict) or payload.get("code") != 200:
            raise CalendarLookupError(f"Aladhan returned an error payload for {url}", month=month, year=year)

        return payload

    @staticmethod
    def _parse_days(payload: Any, month: int, year: int) -> List[CalendarDay]:
        data = payload.get("data")
        if not isinstance(data, list) or not data:
            raise CalendarLookupError("Aladhan payload has no calendar data", month=month, year=year)

        days: List[CalendarDay] = []
        try:
            for item in data:
                gregorian = datetime.strptime(item["gregorian"]["date"], "%d-%m-%Y").date()
                hijri = item["hijri"]
                days.append(
                    CalendarDay(
                        gregorian_date=gregorian,
                        hijri=HijriDate.of(
                            int(hijri["year"]),
                            int(hijri["month"]["number"]),
                            int(hijri["day"]),
                        ),
                    )
                )
        except (KeyError, TypeError, ValueError) as exc:
            raise CalendarLookupError(f"Malformed Aladhan calendar entry: {exc}", month=month, year=year) from exc

        logger.debug("ALADHAN_CALENDAR_FETCHED | month=%s | year=%s | days=%s", month, year, len(days))
        return days

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
