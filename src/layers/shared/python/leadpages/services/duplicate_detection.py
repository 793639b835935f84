"""Duplicate submission detection.

A submission is a duplicate when a lead with the same email or phone was
stored within the trailing window (24 hours by default). The window is
evaluated against the store on every call; nothing is cached.

Lookup failures are treated as "not a duplicate". The worst case is that
the same person is contacted twice, which beats dropping a real lead.
"""

import os
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Protocol

import structlog

from leadpages.models.base import utc_now
from leadpages.models.lead import Lead
from leadpages.repositories.lead_store import LeadStore
from leadpages.utils.exceptions import UpstreamFailure
from leadpages.utils.request_context import mask_email, mask_phone

logger = structlog.get_logger()

DEFAULT_WINDOW_HOURS = 24


class DuplicateChecker(Protocol):
    """Anything that can tell whether a lead was already received."""

    def is_duplicate(self, lead: Lead) -> bool:
        """Return True if the lead repeats a recent submission."""
        ...


class DuplicateDetector:
    """Time-windowed duplicate lookup against the lead store."""

    def __init__(
        self,
        store: LeadStore,
        window_hours: int = DEFAULT_WINDOW_HOURS,
        match_phone: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the detector.

        Args:
            store: Lead store to query.
            window_hours: Trailing window in hours, must be positive.
            match_phone: Also match on phone, not only email.
            clock: Source of "now".
        """
        self.store = store
        self.match_phone = match_phone
        self.clock = clock
        self.window_hours = DEFAULT_WINDOW_HOURS
        self.set_window(window_hours)

    @classmethod
    def from_env(cls, store: LeadStore) -> "DuplicateDetector":
        """Build a detector using DUPLICATE_WINDOW_HOURS."""
        window = int(os.environ.get("DUPLICATE_WINDOW_HOURS", DEFAULT_WINDOW_HOURS))
        return cls(store, window_hours=window)

    def set_window(self, hours: int) -> None:
        """Change the duplicate window.

        Raises:
            ValueError: If hours is zero or negative.
        """
        if hours <= 0:
            raise ValueError("Duplicate window must be greater than 0")
        self.window_hours = hours

    def cutoff(self) -> datetime:
        """Oldest submission time still inside the window."""
        return self.clock() - timedelta(hours=self.window_hours)

    def is_duplicate(self, lead: Lead) -> bool:
        """Check whether this contact already submitted inside the window.

        Args:
            lead: The validated lead.

        Returns:
            True if a matching record exists; False if none exists or the
            lookup failed.
        """
        criteria = {"email": lead.email}
        if self.match_phone:
            criteria["phone"] = lead.phone

        duplicate = self._lookup(criteria)
        if duplicate:
            logger.info(
                "Duplicate submission detected",
                email=mask_email(lead.email),
                phone=mask_phone(lead.phone),
                window_hours=self.window_hours,
            )
        return duplicate

    def is_recent_duplicate(self, email: str) -> bool:
        """Check by email alone."""
        return self._lookup({"email": email.strip().lower()})

    def _lookup(self, criteria: dict[str, str]) -> bool:
        """Run the windowed query, failing open on store errors."""
        try:
            records = self.store.query_recent(criteria, self.cutoff())
        except UpstreamFailure as e:
            logger.warning(
                "Duplicate check failed, allowing submission",
                service=e.service,
                error=e.original_error,
            )
            return False

        return len(records) > 0
