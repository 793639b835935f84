"""Shared layer for the lead pages site: lead capture and content drafts."""

__version__ = "0.1.0"
