"""Helpers for reaching the current application's config and globals."""

import os
from typing import Any, Mapping, Optional

from flask import Flask, current_app, g, has_app_context


def get_application_config(app: Optional[Flask] = None) -> Mapping:
    """
    Get the configuration for an application.

    Falls back to ``os.environ`` when there is no application context, so
    that module-level code (e.g. loggers) can still be configured.
    """
    if app is not None:
        return app.config
    if has_app_context():
        return current_app.config
    return os.environ


def get_application_global() -> Optional[Any]:
    """Get the app context globals, or ``None`` outside a context."""
    if has_app_context():
        return g
    return None
