"""
Provides bearer-token authentication for the movies API.

Intended for use in a Flask application factory, for example:

.. code-block:: python

   from flask import Flask
   from movies.auth import Auth


   def create_web_app() -> Flask:
       app = Flask('movies')
       app.config.from_pyfile('config.py')
       Auth(app)
       return app


Routes are then protected with :func:`.decorators.scoped`. Tokens are
verified against the issuer's published signing keys (JWKS), unless a shared
``JWT_SECRET`` is configured for development.
"""

from .authenticator import Auth, authenticate, current_auth
from . import decorators, exceptions, permissions, tokens
