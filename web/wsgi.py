"""
WSGI entrypoint. In production, point your server (gunicorn/uwsgi) here:

    gunicorn 'wsgi:app' --bind 0.0.0.0:5000

Run a single worker: each process owns its own harbor.
"""

from harborapp import create_app

app = create_app()
