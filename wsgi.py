"""Web Server Gateway Interface entry-point."""

import os
from typing import Optional

from flask import Flask

from chronicle.factory import create_web_app

__flask_app__: Optional[Flask] = None


def application(environ: dict, start_response: object) -> object:
    """WSGI application factory."""
    global __flask_app__
    for key, value in environ.items():
        # SERVER_NAME from the request environ is usually a container id.
        if key == 'SERVER_NAME':
            continue
        if type(value) is str and key not in os.environ:
            os.environ[key] = value
    if __flask_app__ is None:
        __flask_app__ = create_web_app()
    return __flask_app__(environ, start_response)
