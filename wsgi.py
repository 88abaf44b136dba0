"""WSGI entry point for production deployment (gunicorn wsgi:app)."""

import sys
from pathlib import Path

BASE = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE))

from server import create_app, load_settings

app = create_app(load_settings())
