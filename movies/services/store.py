"""
File-backed store for the movie collection.

The whole collection lives in a single JSON array on disk. Every read loads
the full file; every mutation rewrites it. Mutations are serialized through a
lock shared by all :class:`.MovieStore` instances in this process that point
at the same file, so that two concurrent requests cannot both load the same
collection and have the second save clobber the first.

Writes go to a temporary file next to the target, which is then renamed over
it, so a reader never sees a partially written collection.
"""

import json
import os
import tempfile
import threading
from functools import wraps
from typing import Any, Dict, List, Optional

from flask import Flask

from .. import logging
from ..context import get_application_config, get_application_global
from ..domain import Movie
from .exceptions import InvalidMovie, NoSuchMovie, StoreFailure

logger = logging.getLogger(__name__)

INDENT = 2

_locks: Dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: str) -> threading.RLock:
    """Get the writer lock for a resolved file path."""
    with _locks_guard:
        if path not in _locks:
            _locks[path] = threading.RLock()
        return _locks[path]


def serialize(movies: List[Movie]) -> str:
    """Render the collection in its on-disk form."""
    return json.dumps([movie.to_dict() for movie in movies],
                      indent=INDENT, ensure_ascii=False)


def deserialize(raw: str) -> List[Movie]:
    """
    Parse the on-disk form of the collection.

    Raises
    ------
    ValueError
        If ``raw`` is not a JSON array of movie records.

    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError('Expected a JSON array of movies')
    return [Movie.from_dict(record) for record in data]


def next_id(movies: List[Movie]) -> int:
    """One more than the largest id in use, or 1 for an empty collection."""
    if not movies:
        return 1
    return max(movie.id for movie in movies) + 1


class MovieStore(object):
    """Read-modify-write access to the movie collection in one JSON file."""

    def __init__(self, path: str) -> None:
        """Bind the store to the file at ``path``."""
        self.path = os.path.realpath(path)
        self._lock = _lock_for(self.path)

    def load(self) -> List[Movie]:
        """
        Load the full collection.

        A missing file is an empty collection, not an error.

        Raises
        ------
        :class:`.StoreFailure`
            When the file can't be read or doesn't hold a movie collection.

        """
        try:
            with open(self.path, encoding='utf-8') as f:
                raw = f.read()
        except FileNotFoundError:
            return []
        except (OSError, UnicodeDecodeError) as e:
            logger.error('Could not read %s: %s', self.path, e)
            raise StoreFailure(f'Could not read movie data: {e}') from e
        try:
            return deserialize(raw)
        except ValueError as e:     # Includes json.JSONDecodeError.
            logger.error('Could not parse %s: %s', self.path, e)
            raise StoreFailure(f'Could not parse movie data: {e}') from e

    def save(self, movies: List[Movie]) -> None:
        """
        Overwrite the backing file with ``movies``.

        Raises
        ------
        :class:`.StoreFailure`
            When the file can't be written.

        """
        directory = os.path.dirname(self.path)
        tmp_path: Optional[str] = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.movies-',
                                            suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(serialize(movies))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error('Could not write %s: %s', self.path, e)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreFailure(f'Could not write movie data: {e}') from e

    def list_all(self) -> List[Movie]:
        """Get every movie, in insertion order."""
        return self.load()

    def create(self, title: Any) -> Movie:
        """
        Add a new, unwatched movie to the end of the collection.

        Parameters
        ----------
        title : str
            Must be a non-empty string.

        Returns
        -------
        :class:`.Movie`
            The new movie, with its assigned id.

        Raises
        ------
        :class:`.InvalidMovie`
            If ``title`` is missing or empty. Nothing is written.
        :class:`.StoreFailure`

        """
        if not title or not isinstance(title, str):
            raise InvalidMovie('Movie title is required')
        with self._lock:
            movies = self.load()
            movie = Movie(id=next_id(movies), title=title, watched=False)
            movies.append(movie)
            self.save(movies)
        logger.debug('Created movie %i', movie.id)
        return movie

    def toggle_watched(self, movie_id: int) -> Movie:
        """
        Flip the ``watched`` flag of a movie.

        Raises
        ------
        :class:`.NoSuchMovie`
        :class:`.StoreFailure`

        """
        with self._lock:
            movies = self.load()
            for i, movie in enumerate(movies):
                if movie.id == movie_id:
                    break
            else:
                raise NoSuchMovie(f'No movie with id {movie_id}')
            updated = movie._replace(watched=not movie.watched)
            movies[i] = updated
            self.save(movies)
        logger.debug('Toggled movie %i to watched=%s', movie_id,
                     updated.watched)
        return updated

    def delete(self, movie_id: int) -> None:
        """
        Remove a movie from the collection.

        Raises
        ------
        :class:`.NoSuchMovie`
        :class:`.StoreFailure`

        """
        with self._lock:
            movies = self.load()
            remaining = [movie for movie in movies if movie.id != movie_id]
            if len(remaining) == len(movies):
                raise NoSuchMovie(f'No movie with id {movie_id}')
            self.save(remaining)
        logger.debug('Deleted movie %i', movie_id)


def init_app(app: Optional[Flask] = None) -> None:
    """Set default configuration parameters for an application instance."""
    config = get_application_config(app)
    config.setdefault('MOVIES_FILE',
                      os.path.join(os.getcwd(), 'data', 'movies.json'))


def get_store(app: Optional[Flask] = None) -> MovieStore:
    """Get a :class:`.MovieStore` for the configured ``MOVIES_FILE``."""
    config = get_application_config(app)
    return MovieStore(config['MOVIES_FILE'])


def current_store() -> MovieStore:
    """Get/create the :class:`.MovieStore` for this context."""
    g = get_application_global()
    if g is None:
        return get_store()
    if 'movie_store' not in g:
        g.movie_store = get_store()
    return g.movie_store    # type: ignore


@wraps(MovieStore.load)
def load() -> List[Movie]:
    return current_store().load()


@wraps(MovieStore.list_all)
def list_all() -> List[Movie]:
    return current_store().list_all()


@wraps(MovieStore.create)
def create(title: Any) -> Movie:
    return current_store().create(title)


@wraps(MovieStore.toggle_watched)
def toggle_watched(movie_id: int) -> Movie:
    return current_store().toggle_watched(movie_id)


@wraps(MovieStore.delete)
def delete(movie_id: int) -> None:
    return current_store().delete(movie_id)
