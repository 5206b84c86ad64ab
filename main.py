"""WSGI entrypoint for the recipe box service.

The Flask development server is intentionally not started from this module so
that deployments rely on Gunicorn (``gunicorn main:app``). Local development
can still use ``flask --app main run`` which imports the ``app`` object
defined below.
"""

import logging
import os
import sys

from recipebox import create_app

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = create_app()


__all__ = ["app"]
