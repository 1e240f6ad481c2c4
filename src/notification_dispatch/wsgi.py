"""WSGI entry point for gunicorn.

Usage:
    gunicorn notification_dispatch.wsgi:app --bind 0.0.0.0:8000
"""
from notification_dispatch.api.app import build_app

app = build_app()
