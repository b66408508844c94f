"""Application factory for the movies app."""

from flask import Flask, Response, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, Forbidden, HTTPException, \
    InternalServerError, MethodNotAllowed, NotFound, Unauthorized

from . import logging
from .auth import Auth
from .routes import external_api
from .services import store

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException) -> Response:
    """Render an HTTP exception as ``{"reason": ...}``."""
    exc_resp = error.get_response()
    response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    if response.status_code == Unauthorized.code:
        response.headers['WWW-Authenticate'] = 'Bearer'
    return response


def create_web_app() -> Flask:
    """Initialize and configure the movies application."""
    app = Flask('movies')
    app.config.from_pyfile('config.py')

    origins = [o.strip() for o in app.config['CORS_ORIGINS'].split(',')]
    CORS(app, resources={r'/api/*': {'origins': origins}})

    store.init_app(app)
    Auth(app)

    app.register_blueprint(external_api.blueprint)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(Forbidden)(jsonify_exception)
    app.errorhandler(MethodNotAllowed)(jsonify_exception)
    app.errorhandler(InternalServerError)(jsonify_exception)
    logger.debug('Created movies app; store at %s', app.config['MOVIES_FILE'])
    return app
