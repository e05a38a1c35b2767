"""Entry point WSGI (p.ej. `gunicorn api.wsgi:app`).

La configuración de logging se hace una vez, al importar el módulo en el
arranque del proceso.
"""

from __future__ import annotations

from api.app import create_app
from cli.logging import configure_logging
from core.config import AppSettings

settings = AppSettings()
configure_logging(settings.log_level)

app = create_app(settings)
