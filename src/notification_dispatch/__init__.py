"""Notification dispatch: templates, providers and a retrying delivery pipeline."""

__version__ = "0.1.0"
