"""Handles all movie-related requests."""

import re
from typing import Any, Dict, List, Optional, Tuple, Union

from flask import url_for

from .. import logging, status
from ..services import store
from ..services.exceptions import InvalidMovie, NoSuchMovie, StoreFailure

logger = logging.getLogger(__name__)

NO_SUCH_MOVIE = {'reason': 'Movie not found.'}
MISSING_TITLE = {'reason': 'Movie title is required.'}
CANT_READ = {'reason': 'Error reading movie data.'}
CANT_CREATE = {'reason': 'Error saving new movie.'}
CANT_UPDATE = {'reason': 'Error updating movie.'}
CANT_DELETE = {'reason': 'Error deleting movie.'}

Response = Tuple[Optional[Union[dict, list]], int, Dict[str, str]]


def parse_id(movie_id: str) -> Optional[int]:
    """Get a movie id from a URL path segment, if it is one."""
    if not re.fullmatch(r'[0-9]+', movie_id):
        return None
    return int(movie_id)


def list_movies() -> Response:
    """
    Get the whole movie list.

    Returns
    -------
    list
        Every movie, in the order they were added.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    try:
        movies = store.list_all()
    except StoreFailure as e:
        logger.error('Could not list movies: %s', e)
        return CANT_READ, status.HTTP_500_INTERNAL_SERVER_ERROR, {}
    data: List[dict] = [movie.to_dict() for movie in movies]
    return data, status.HTTP_200_OK, {}


def create_movie(payload: Any) -> Response:
    """
    Add a new movie to the list.

    Parameters
    ----------
    payload : dict
        Request body; must have a non-empty ``title``.

    Returns
    -------
    dict
        The new movie.
    int
        An HTTP status code.
    dict
        Some extra headers to add to the response.

    """
    title = payload.get('title') if isinstance(payload, dict) else None
    try:
        movie = store.create(title)
    except InvalidMovie:
        return MISSING_TITLE, status.HTTP_400_BAD_REQUEST, {}
    except StoreFailure as e:
        logger.error('Could not create movie: %s', e)
        return CANT_CREATE, status.HTTP_500_INTERNAL_SERVER_ERROR, {}
    headers = {'Location': url_for('external_api.toggle_watched',
                                   movie_id=movie.id)}
    return movie.to_dict(), status.HTTP_201_CREATED, headers


def toggle_watched(movie_id: str) -> Response:
    """Flip whether a movie has been watched."""
    parsed = parse_id(movie_id)
    if parsed is None:
        return NO_SUCH_MOVIE, status.HTTP_404_NOT_FOUND, {}
    try:
        movie = store.toggle_watched(parsed)
    except NoSuchMovie:
        return NO_SUCH_MOVIE, status.HTTP_404_NOT_FOUND, {}
    except StoreFailure as e:
        logger.error('Could not update movie %i: %s', parsed, e)
        return CANT_UPDATE, status.HTTP_500_INTERNAL_SERVER_ERROR, {}
    return movie.to_dict(), status.HTTP_200_OK, {}


def delete_movie(movie_id: str) -> Response:
    """Remove a movie from the list. Responds with no content."""
    parsed = parse_id(movie_id)
    if parsed is None:
        return NO_SUCH_MOVIE, status.HTTP_404_NOT_FOUND, {}
    try:
        store.delete(parsed)
    except NoSuchMovie:
        return NO_SUCH_MOVIE, status.HTTP_404_NOT_FOUND, {}
    except StoreFailure as e:
        logger.error('Could not delete movie %i: %s', parsed, e)
        return CANT_DELETE, status.HTTP_500_INTERNAL_SERVER_ERROR, {}
    return None, status.HTTP_204_NO_CONTENT, {}
