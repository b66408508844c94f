"""Exceptions raised by the movie store."""


class StoreFailure(IOError):
    """The backing file could not be read, parsed or written."""


class NoSuchMovie(RuntimeError):
    """There is no movie with the requested id."""


class InvalidMovie(ValueError):
    """Data for a new movie is not acceptable."""
