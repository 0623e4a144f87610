"""Destination listings ingestion from OpenStreetMap."""

__version__ = "0.1.0"
