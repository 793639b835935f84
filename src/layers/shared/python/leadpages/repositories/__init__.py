"""Repositories for persisted records."""

from leadpages.repositories.lead_store import AirtableLeadStore, LeadStore, to_airtable_fields

__all__ = [
    "AirtableLeadStore",
    "LeadStore",
    "to_airtable_fields",
]
