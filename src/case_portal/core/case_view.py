"""
Case View

View-local state for one case detail page: the case, its sightings and a
loading flag. Only one fetch is in flight per view; mutations refetch through
refresh() and never update the record optimistically.
"""

import asyncio
import logging
from typing import List, Optional

from case_portal.core.case_state import sightings_for_display
from case_portal.infrastructure.api.client import (
    ApiError,
    CaseDetail,
    CaseNotFoundError,
    MissingPersonsClient,
)
from case_portal.models.case import Case
from case_portal.models.outcomes import Notice, NoticeLevel
from case_portal.models.requests import DisplaySighting
from case_portal.models.sighting import Sighting

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading person details"


class CaseView:
    """Loaded state of a single case detail view"""

    def __init__(self, client: MissingPersonsClient, case_id: str):
        self.client = client
        self.case_id = case_id
        self.case: Optional[Case] = None
        self.sightings: List[Sighting] = []
        self.loading = False
        self.not_found = False
        self.notice: Optional[Notice] = None
        self.closed = False
        self._lock = asyncio.Lock()
        self._fetch: Optional[asyncio.Task] = None

    @property
    def loaded(self) -> bool:
        return self.case is not None

    @property
    def display_sightings(self) -> List[DisplaySighting]:
        return sightings_for_display(self.sightings)

    async def load(self) -> bool:
        """
        Fetch the case and its sightings into the view

        A transient failure keeps whatever was loaded before and records an
        error notice. A missing case clears the view and sets not_found.

        Returns:
            True if a case is in view after the fetch
        """
        if self.closed:
            raise RuntimeError(f"Case view {self.case_id} is closed")

        async with self._lock:
            self.loading = True
            self.notice = None
            self._fetch = asyncio.ensure_future(self.client.get_case(self.case_id))
            try:
                detail: CaseDetail = await self._fetch
            except asyncio.CancelledError:
                if self.closed:
                    logger.info(f"Fetch of case {self.case_id} cancelled on close")
                    return False
                raise
            except CaseNotFoundError:
                logger.warning(f"Case not found: {self.case_id}")
                self.case = None
                self.sightings = []
                self.not_found = True
                self.notice = Notice(level=NoticeLevel.ERROR, message=LOAD_ERROR_MESSAGE)
                return False
            except ApiError as e:
                logger.error(f"Loading case {self.case_id} failed: {e.message}")
                self.notice = Notice(level=NoticeLevel.ERROR, message=LOAD_ERROR_MESSAGE)
                return self.loaded
            finally:
                self._fetch = None
                if not self.closed:
                    self.loading = False

            self.case = detail.case
            self.sightings = detail.sightings
            self.not_found = False
            return True

    async def refresh(self) -> bool:
        """Refetch after a mutation"""
        return await self.load()

    def close(self):
        """Tear the view down, cancelling any in-flight fetch"""
        self.closed = True
        if self._fetch is not None and not self._fetch.done():
            self._fetch.cancel()
