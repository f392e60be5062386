"""Today's date in the Gregorian and Hijri calendars (AlAdhan API).

Display only; the result never feeds a calculation.
Fetches are user-triggered and may fail without consequence.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from typing import Optional

import requests

from .config import DATE_API_ENV, DEFAULT_DATE_API

logger = logging.getLogger(__name__)

# Timeout for HTTP calls (seconds)
_TIMEOUT = 10


class FetchError(Exception):
    """Raised when the date fetch fails for any reason."""


@dataclass(frozen=True)
class CalendarDate:
    gregorian: str      # DD-MM-YYYY
    hijri: str          # DD-MM-YYYY
    hijri_month: str    # English month name, e.g. "Ramadan"


def _base_url() -> str:
    return os.environ.get(DATE_API_ENV, DEFAULT_DATE_API).rstrip("/")


def fetch_today(today: Optional[date] = None) -> CalendarDate:
    """Convert *today* (default: the local date) to the Hijri calendar.

    Raises FetchError on any error (network, parsing, missing data).
    """
    day = today or date.today()
    gregorian = day.strftime("%d-%m-%Y")
    url = f"{_base_url()}/gToH/{gregorian}"
    logger.debug("Fetching calendar date from %s", url)

    try:
        resp = requests.get(url, timeout=_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"Date API request failed: {exc}") from exc

    try:
        data = resp.json()
        hijri = data["data"]["hijri"]
        return CalendarDate(
            gregorian=gregorian,
            hijri=hijri["date"],
            hijri_month=hijri["month"]["en"],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise FetchError(f"Failed to parse date API response: {exc}") from exc
