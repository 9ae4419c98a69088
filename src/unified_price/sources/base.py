"""Price source protocol and the soft-failure boundary shared by adapters.

Architecture
------------
Each upstream (chart API, fund estimate/NAV pages, crypto simple-price)
has one adapter. Adapters raise ``SourceError`` subclasses internally;
``BaseSource.fetch`` is the boundary that turns them into a ``Failure``
value and logs it:

    code, date → BaseSource.fetch → _fetch (may raise) → record | Failure

The resolver only ever sees records or failures, never exceptions.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from unified_price.core.exceptions import ParseError, SourceError
from unified_price.core.models import Failure, PriceRecord
from unified_price.sources.http import HttpFetcher

logger = logging.getLogger(__name__)


@runtime_checkable
class PriceSource(Protocol):
    """Anything that can turn an instrument code into a price record."""

    @property
    def name(self) -> str: ...

    async def fetch(self, code: str, on: date | None = None) -> PriceRecord | Failure:
        """Return the record for ``code`` (optionally as of ``on``) or a Failure."""
        ...


class BaseSource:
    """Shared plumbing for HTTP-backed price sources.

    Subclasses set ``name`` and implement ``_fetch``, raising
    ``SourceError`` subclasses on any problem.
    """

    name: str = "source"

    def __init__(self, fetcher: HttpFetcher, base_url: str) -> None:
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    async def fetch(self, code: str, on: date | None = None) -> PriceRecord | Failure:
        try:
            return await self._fetch(code, on)
        except ValidationError as e:
            error = ParseError(
                f"Upstream record failed validation: {e.errors()[0]['msg']}",
                context={"reason": "validation", "error_count": e.error_count()},
            )
            return self._fail(code, error)
        except SourceError as e:
            return self._fail(code, e)

    async def _fetch(self, code: str, on: date | None) -> PriceRecord:
        raise NotImplementedError

    def _fail(self, code: str, exc: SourceError) -> Failure:
        failure = Failure.from_error(self.name, exc)
        logger.warning(
            "%s source failed for %s (%s): %s",
            self.name,
            code,
            failure.kind,
            failure.message,
        )
        return failure
