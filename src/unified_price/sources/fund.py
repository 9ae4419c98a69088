"""Mutual fund NAV source: Eastmoney / 1234567.com.cn.

Two upstreams depending on whether a date is requested:

- real-time estimate: ``/js/{code}.js`` on fundgz, a GBK-encoded JSONP body
  ``jsonpgz({...});`` with ``gsz`` (estimate), ``dwjz`` (last disclosed NAV)
  and ``jzrq`` (NAV date);
- historical NAV: ``/f10/F10DataApi.aspx?type=lsjz`` which renders an HTML
  table ``<table class="w782 comm lsjz">`` wrapped in a JS variable.

The historical page is not a documented API, so parsing runs two ordered
strategies: strict table extraction, then a loose whole-page pattern match
used only when no table is present.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date

from bs4 import BeautifulSoup, Tag

from unified_price.core.exceptions import MissingDataError, NoDataError, ParseError
from unified_price.core.models import FundNav, NavKind
from unified_price.sources.base import BaseSource
from unified_price.sources.http import HttpFetcher

logger = logging.getLogger(__name__)

_ESTIMATE_PATH = "/js/{code}.js"
_HISTORY_PATH = "/f10/F10DataApi.aspx"
_JSONP_PREFIX = "jsonpgz("
_JSONP_SUFFIXES = (");", ")")
_UPSTREAM_ENCODING = "gbk"

_REQUEST_HEADERS = {
    "Accept": "*/*",
    "Referer": "https://fund.eastmoney.com/",
}

_NAV_TABLE_SELECTOR = "table.w782.comm.lsjz"
_LOOSE_DATE_RE = re.compile(r"<td>(\d{4}-\d{2}-\d{2})</td>")
_LOOSE_NAV_RE = re.compile(r"<td class=['\"]tor bold['\"]>([0-9.]+)</td>")


# --- Real-time estimate ---


def strip_jsonp(body: str) -> str:
    """Remove the ``jsonpgz(`` … ``);`` envelope and return the JSON text."""
    text = body.strip()
    if not text.startswith(_JSONP_PREFIX):
        raise ParseError(
            "Estimate body is not wrapped in jsonpgz(...)",
            context={"reason": "jsonp", "head": text[:20]},
        )
    text = text[len(_JSONP_PREFIX) :]
    for suffix in _JSONP_SUFFIXES:
        if text.endswith(suffix):
            return text[: -len(suffix)]
    raise ParseError(
        "Estimate body has no closing ');'",
        context={"reason": "jsonp", "tail": text[-20:]},
    )


def parse_estimate(raw: bytes) -> FundNav:
    """Parse a GBK-encoded JSONP estimate payload into a realtime FundNav.

    The estimate (``gsz``) is preferred over the last disclosed value
    (``dwjz``).
    """
    try:
        body = raw.decode(_UPSTREAM_ENCODING)
    except UnicodeDecodeError as e:
        raise ParseError(
            f"Estimate body is not valid {_UPSTREAM_ENCODING}",
            context={"reason": "encoding"},
        ) from e

    json_text = strip_jsonp(body)
    try:
        info = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Estimate JSON is invalid: {e.msg}",
            context={"reason": "json"},
        ) from e
    if not isinstance(info, dict):
        raise ParseError("Estimate JSON is not an object", context={"reason": "shape"})

    nav = info.get("gsz") or info.get("dwjz")
    if not nav:
        raise MissingDataError(
            "Estimate has neither gsz nor dwjz",
            context={"field": "gsz|dwjz"},
        )
    nav_date = info.get("jzrq")
    if not nav_date:
        raise MissingDataError("Estimate has no jzrq date", context={"field": "jzrq"})

    return FundNav(nav=str(nav), date=nav_date, kind=NavKind.REALTIME)


# --- Historical NAV table ---


def find_nav_table(soup: BeautifulSoup) -> Tag | None:
    """Locate the historical NAV table by its class marker."""
    return soup.select_one(_NAV_TABLE_SELECTOR)


def table_data_rows(table: Tag) -> list[Tag]:
    """Return the table's body rows, skipping header rows."""
    rows: list[Tag] = []
    for row in table.find_all("tr"):
        if row.find_parent("thead") is not None:
            continue
        if not row.find("td"):
            continue
        rows.append(row)
    return rows


def row_cells(row: Tag) -> list[str]:
    """Split a row into cell texts with any nested markup removed."""
    return [td.get_text(strip=True) for td in row.find_all("td")]


def parse_history_table(page: str) -> FundNav | None:
    """Strict strategy: read the first data row of the NAV table.

    Returns None when the page has no NAV table at all, so the caller can
    try the loose strategy.

    Raises:
        NoDataError: The table exists but has no data rows.
        ParseError: The first data row has fewer than two cells.
    """
    soup = BeautifulSoup(page, "lxml")
    table = find_nav_table(soup)
    if table is None:
        return None

    rows = table_data_rows(table)
    if not rows:
        raise NoDataError("NAV table has no data rows", context={"field": "lsjz rows"})

    cells = row_cells(rows[0])
    if len(cells) < 2:
        raise ParseError(
            f"NAV row has {len(cells)} cell(s), expected at least 2",
            context={"reason": "row", "cells": cells},
        )
    return FundNav(nav=cells[1], date=cells[0], kind=NavKind.HISTORICAL)


def parse_history_loose(page: str) -> FundNav | None:
    """Loose strategy: pair the first bare date cell with the first bold NAV cell."""
    date_match = _LOOSE_DATE_RE.search(page)
    nav_match = _LOOSE_NAV_RE.search(page)
    if date_match is None or nav_match is None:
        return None
    return FundNav(
        nav=nav_match.group(1),
        date=date_match.group(1),
        kind=NavKind.HISTORICAL,
    )


def parse_history_page(page: str) -> FundNav:
    """Run the strict strategy, then the loose one if no table was found."""
    nav = parse_history_table(page)
    if nav is not None:
        return nav

    logger.debug("NAV table not found, falling back to loose pattern match")
    nav = parse_history_loose(page)
    if nav is not None:
        return nav

    raise MissingDataError(
        "No fund NAV table or NAV cells found in page",
        context={"field": _NAV_TABLE_SELECTOR},
    )


class FundSource(BaseSource):
    """Six-digit Chinese mutual funds, priced in CNY."""

    name = "fund"

    def __init__(
        self,
        fetcher: HttpFetcher,
        estimate_base_url: str,
        history_base_url: str,
    ) -> None:
        super().__init__(fetcher, estimate_base_url)
        self._history_base_url = history_base_url.rstrip("/")

    async def _fetch(self, code: str, on: date | None) -> FundNav:
        if on is None:
            url = self._base_url + _ESTIMATE_PATH.format(code=code)
            raw = await self._fetcher.get_bytes(url, headers=_REQUEST_HEADERS)
            return parse_estimate(raw)

        day = on.isoformat()
        params = {
            "type": "lsjz",
            "code": code,
            "sdate": day,
            "edate": day,
            "per": "1",
        }
        page = await self._fetcher.get_text(
            self._history_base_url + _HISTORY_PATH,
            params=params,
            headers=_REQUEST_HEADERS,
        )
        return parse_history_page(page)
