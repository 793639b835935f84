"""Airtable-backed lead store.

Airtable is the system of record for leads. This adapter maps the Lead
model onto the table's column names and exposes the two operations the
submission pipeline needs: create one record, and find recent records for
a contact.
"""

import os
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Protocol

import requests
import structlog
from pyairtable import Api
from pyairtable.formulas import match

from leadpages.models.base import utc_now
from leadpages.models.lead import Lead, LeadStatus
from leadpages.utils.exceptions import ConfigurationError, UpstreamFailure

logger = structlog.get_logger()

DEFAULT_TABLE = "Leads"
SUBMISSION_DATE_FIELD = "Submission Date"
STATUS_FIELD = "Status"

# Lead attribute -> Airtable column
FIELD_MAP: dict[str, str] = {
    "full_name": "Full Name",
    "email": "Email",
    "phone": "Phone",
    "zip_code": "ZIP Code",
    "project_type": "Project Type",
    "timeframe": "Timeframe",
    "budget": "Budget",
    "property_type": "Property Type",
    "own_rent": "Own or Rent",
    "tcpa_consent": "TCPA Consent",
    "landing_page_url": "Landing Page URL",
}

# Written only when present
OPTIONAL_FIELD_MAP: dict[str, str] = {
    "utm_source": "UTM Source",
    "utm_medium": "UTM Medium",
    "utm_campaign": "UTM Campaign",
    "gclid": "GCLID",
    "fbclid": "FBCLID",
}


class LeadStore(Protocol):
    """Persistence for leads."""

    def create(self, lead: Lead) -> str:
        """Persist a lead and return the new record ID."""
        ...

    def query_recent(self, criteria: Mapping[str, str | None], since: datetime) -> list[dict]:
        """Find records matching any criterion, submitted after ``since``."""
        ...


def to_airtable_fields(lead: Lead, submitted_at: datetime) -> dict[str, Any]:
    """Translate a lead into an Airtable ``fields`` dict.

    Args:
        lead: The validated lead.
        submitted_at: Server timestamp stamped on the record.

    Returns:
        Column name -> value, without empty optional columns.
    """
    fields: dict[str, Any] = {
        column: getattr(lead, attr) for attr, column in FIELD_MAP.items()
    }

    for attr, column in OPTIONAL_FIELD_MAP.items():
        value = getattr(lead, attr)
        if value:
            fields[column] = value

    fields[SUBMISSION_DATE_FIELD] = submitted_at.isoformat()
    fields[STATUS_FIELD] = LeadStatus.PENDING.value
    return fields


class AirtableLeadStore:
    """Lead store backed by one Airtable table."""

    def __init__(
        self,
        api_key: str | None,
        base_id: str | None,
        table_name: str = DEFAULT_TABLE,
        table: Any = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the store.

        Credentials are checked on first use rather than here, so a handler
        can be built even when the environment is incomplete.

        Args:
            api_key: Airtable personal access token.
            base_id: Airtable base ID (``app...``).
            table_name: Table name or ID inside the base.
            table: Optional pre-built pyairtable Table (tests pass a mock).
            clock: Source of the submission timestamp.
        """
        self.api_key = api_key
        self.base_id = base_id
        self.table_name = table_name
        self.clock = clock
        self._table = table

    @classmethod
    def from_env(cls) -> "AirtableLeadStore":
        """Build a store from AIRTABLE_* environment variables."""
        return cls(
            api_key=os.environ.get("AIRTABLE_API_KEY"),
            base_id=os.environ.get("AIRTABLE_BASE_ID"),
            table_name=os.environ.get("AIRTABLE_TABLE_ID", DEFAULT_TABLE),
        )

    @property
    def table(self):
        """Get the pyairtable Table (lazy initialization)."""
        if self._table is None:
            if not self.api_key:
                raise ConfigurationError("AIRTABLE_API_KEY", "Airtable API key not configured")
            if not self.base_id:
                raise ConfigurationError("AIRTABLE_BASE_ID", "Airtable base ID not configured")
            self._table = Api(self.api_key).table(self.base_id, self.table_name)
        return self._table

    def create(self, lead: Lead) -> str:
        """Create a lead record stamped with the current time and Pending status.

        Args:
            lead: The validated lead.

        Returns:
            The Airtable record ID.

        Raises:
            UpstreamFailure: If Airtable rejects the write or is unreachable.
            ConfigurationError: If credentials are missing.
        """
        fields = to_airtable_fields(lead, self.clock())
        table = self.table

        try:
            record = table.create(fields)
        except requests.RequestException as e:
            logger.error("Airtable create failed", error=str(e), table=self.table_name)
            raise UpstreamFailure("airtable", original_error=str(e)) from e

        return record["id"]

    def query_recent(self, criteria: Mapping[str, str | None], since: datetime) -> list[dict]:
        """Find records that match any of the criteria and are newer than ``since``.

        Args:
            criteria: Lead attribute name -> value, e.g. ``{"email": ...}``.
                Criteria with empty values are skipped.
            since: Only records with a later submission date are returned.

        Returns:
            At most one matching record; existence is all callers need.

        Raises:
            UpstreamFailure: If the query fails.
            ValueError: If no usable criterion was given.
        """
        formula = build_recent_formula(criteria, since)
        table = self.table

        try:
            return table.all(formula=formula, max_records=1)
        except requests.RequestException as e:
            logger.error("Airtable query failed", error=str(e), table=self.table_name)
            raise UpstreamFailure("airtable", original_error=str(e)) from e


def build_recent_formula(criteria: Mapping[str, str | None], since: datetime) -> str:
    """Build ``AND(OR({Email}='..', {Phone}='..'), IS_AFTER({Submission Date}, '..'))``."""
    columns = {
        FIELD_MAP[attr]: value
        for attr, value in criteria.items()
        if value and attr in FIELD_MAP
    }
    if not columns:
        raise ValueError("At least one lookup criterion is required")

    contact_match = str(match(columns, match_any=True))
    return f"AND({contact_match}, IS_AFTER({{{SUBMISSION_DATE_FIELD}}}, '{since.isoformat()}'))"
