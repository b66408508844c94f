"""Web Server Gateway Interface entry-point."""

import os
from typing import Any, Callable, Iterable, Optional

from flask import Flask

from movies.factory import create_web_app

__flask_app__: Optional[Flask] = None


def application(environ: dict, start_response: Callable) -> Iterable[Any]:
    """WSGI application."""
    global __flask_app__
    if __flask_app__ is None:
        for key, value in environ.items():
            # Keep SERVER_NAME as configured rather than whatever host name
            # the WSGI server (e.g. uWSGI in a container) passes in.
            if key == 'SERVER_NAME':
                continue
            if isinstance(value, str):
                os.environ[key] = value
        __flask_app__ = create_web_app()
    return __flask_app__(environ, start_response)
