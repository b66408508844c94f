"""Flask configuration for the movies service."""

import os

VERSION = '0.1.0'

PORT = int(os.environ.get('PORT', '3001'))
"""Port for the development server (see ``app.py``)."""

MOVIES_FILE = os.environ.get('MOVIES_FILE',
                             os.path.join(os.getcwd(), 'data', 'movies.json'))
"""Path of the JSON file that holds the movie collection."""

AUTH_ISSUER_BASE_URL = os.environ.get(
    'AUTH_ISSUER_BASE_URL',
    os.environ.get('AUTH0_ISSUER_BASE_URL',
                   'https://movies-demo.us.auth0.com')
)
"""Base URL of the trusted token issuer. Placeholder; override it."""

AUTH_ISSUER = os.environ.get('AUTH_ISSUER')
"""Exact ``iss`` to trust. If unset, derived from the base URL."""

AUTH_AUDIENCE = os.environ.get(
    'AUTH_AUDIENCE',
    os.environ.get('AUTH0_AUDIENCE', 'https://movies.example.com')
)
"""Audience that tokens must be issued for. Placeholder; override it."""

AUTH_JWKS_URL = os.environ.get('AUTH_JWKS_URL')
"""Where to get signing keys. Defaults to the issuer's well-known JWKS."""

AUTH_ALGORITHMS = os.environ.get('AUTH_ALGORITHMS', 'RS256')
AUTH_LEEWAY = int(os.environ.get('AUTH_LEEWAY', '0'))
AUTH_PERMISSIONS_CLAIM = os.environ.get('AUTH_PERMISSIONS_CLAIM',
                                        'permissions')

JWT_SECRET = os.environ.get('JWT_SECRET')
"""Shared HS256 secret. For development only; disables JWKS lookups."""

READ_POLICY = os.environ.get('READ_POLICY', 'authenticated')
"""Either ``authenticated`` or ``public``; governs ``GET /api/movies``."""

CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

LOGFILE = os.environ.get('LOGFILE')
LOGLEVEL = os.environ.get('LOGLEVEL', 20)
