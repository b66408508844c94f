"""Defines the core data structures for the movies service."""

from datetime import datetime
from typing import Any, Dict, FrozenSet, Mapping, NamedTuple, Optional, \
    Tuple


class Movie(NamedTuple):
    """A movie on the list."""

    id: int
    """Assigned by the store; unique within the collection."""

    title: str

    watched: bool = False
    """Only ever flipped, never set directly."""

    extra: Mapping[str, Any] = {}
    """Any other fields found on the stored record, written back as-is."""

    def to_dict(self) -> Dict[str, Any]:
        """Represent the movie as it is stored and served."""
        data = {'id': self.id, 'title': self.title, 'watched': self.watched}
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Movie':
        """
        Instantiate a :class:`.Movie` from stored data.

        Values are kept as they were stored, so that saving a loaded
        collection does not change it.

        Raises
        ------
        ValueError
            If ``data`` is not a movie record.

        """
        if not isinstance(data, dict):
            raise ValueError('Movie record must be an object')
        movie_id = data.get('id')
        # bool is an int subclass, but never a valid id.
        if not isinstance(movie_id, int) or isinstance(movie_id, bool):
            raise ValueError('Movie record has no integer id')
        extra = {k: v for k, v in data.items()
                 if k not in ('id', 'title', 'watched')}
        return cls(id=movie_id, title=data.get('title'),
                   watched=data.get('watched', False), extra=extra)


class Identity(NamedTuple):
    """
    An authenticated caller, as declared by a verified credential.

    Lives only as long as the request that carried the credential.
    """

    issuer: str
    audience: Tuple[str, ...]
    expires: datetime
    permissions: FrozenSet[str] = frozenset()
    subject: Optional[str] = None
