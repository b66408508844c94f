"""Helpers for tests that need an app and credentials."""

import time
from typing import Any, List, Optional

from flask import Flask

from movies.auth import permissions, tokens
from movies.factory import create_web_app

SECRET = 'foosecret'
ISSUER = 'https://movies-test.example.auth0.com'
AUDIENCE = 'https://movies.example.com/test'


def claims(granted: Optional[List[str]] = None, **overrides: Any) -> dict:
    """Claims for a token that the test app will accept."""
    now = int(time.time())
    data = {
        'sub': 'auth0|1234',
        'iss': f'{ISSUER}/',
        'aud': AUDIENCE,
        'iat': now,
        'exp': now + 3600,
        'permissions': granted if granted is not None else []
    }
    data.update(overrides)
    return data


def generate_token(data: dict, secret: str = SECRET) -> str:
    """Helper function for generating a JWT."""
    return tokens.encode(data, secret)


def bearer(data: dict, secret: str = SECRET) -> dict:
    """Headers carrying a token for ``data``."""
    return {'Authorization': f'Bearer {generate_token(data, secret)}'}


def manager() -> dict:
    """Headers for a caller who may manage movies."""
    return bearer(claims([permissions.MANAGE_MOVIES]))


def viewer() -> dict:
    """Headers for a caller with a valid token but no permissions."""
    return bearer(claims([]))


def create_test_app(movies_file: str, **config: Any) -> Flask:
    """Create the app, pointed at ``movies_file`` and the test issuer."""
    app = create_web_app()
    app.config['TESTING'] = True
    app.config['MOVIES_FILE'] = movies_file
    app.config['JWT_SECRET'] = SECRET
    app.config['AUTH_ISSUER_BASE_URL'] = ISSUER
    app.config['AUTH_ISSUER'] = None
    app.config['AUTH_AUDIENCE'] = AUDIENCE
    app.config['READ_POLICY'] = 'authenticated'
    app.config.update(config)
    return app
