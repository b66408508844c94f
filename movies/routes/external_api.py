"""Provides routes for the external API."""

from flask import Blueprint, Response, jsonify, make_response, request

from .. import status
from ..auth import permissions
from ..auth.decorators import scoped
from ..controllers import movies

blueprint = Blueprint('external_api', __name__, url_prefix='/api')


def _respond(data: object, status_code: int, headers: dict) -> Response:
    if data is None:
        response = make_response('', status_code)
    else:
        response = make_response(jsonify(data), status_code)
    response.headers.extend(headers)
    return response


@blueprint.route('/status', methods=['GET'])
def ok() -> tuple:
    """Health check endpoint."""
    return jsonify({'status': 'ok'}), status.HTTP_200_OK


@blueprint.route('/movies', methods=['GET'])
@scoped(allow_public=True)
def list_movies() -> Response:
    """List every movie."""
    return _respond(*movies.list_movies())


@blueprint.route('/movies', methods=['POST'])
@scoped(permissions.MANAGE_MOVIES)
def create_movie() -> Response:
    """Add a movie."""
    payload = request.get_json(force=True, silent=True)  # Ignore Content-Type.
    return _respond(*movies.create_movie(payload))


@blueprint.route('/movies/<movie_id>', methods=['PUT'])
@scoped(permissions.MANAGE_MOVIES)
def toggle_watched(movie_id: str) -> Response:
    """Flip whether a movie has been watched."""
    return _respond(*movies.toggle_watched(movie_id))


@blueprint.route('/movies/<movie_id>', methods=['DELETE'])
@scoped(permissions.MANAGE_MOVIES)
def delete_movie(movie_id: str) -> Response:
    """Remove a movie."""
    return _respond(*movies.delete_movie(movie_id))
