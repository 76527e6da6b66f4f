"""WSGI entrypoint for the recipe service.

The Flask development server is intentionally not started from this module so
that deployments rely on Gunicorn (``gunicorn main:app``). Local development
can still use ``flask --app main run`` which imports the ``app`` object
defined below.
"""

from recipebook import create_app
from recipebook.config import Settings
from recipebook.logging_setup import setup_logging

settings = Settings.from_env()
setup_logging(settings.log_level)

app = create_app(settings=settings)


__all__ = ["app"]
