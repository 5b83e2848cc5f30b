# online_shop/core/logging_config.py
"""
Configuración centralizada del logging de la aplicación.

Los módulos solo declaran `logger = logging.getLogger(__name__)`; el formato
y el nivel se fijan aquí una única vez a partir de `Settings`.
"""

import logging

from online_shop.core.config import Settings

_configured = False


def setup_logging(settings: Settings) -> None:
    """
    Configura el logger raíz con el nivel y formato de la configuración.

    Llamadas repetidas (por ejemplo, varias apps creadas en los tests) solo
    ajustan el nivel, sin duplicar handlers.
    """
    global _configured

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    if not _configured:
        logging.basicConfig(level=level, format=settings.LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(level)

    # El engine de SQLAlchemy es muy verboso; solo se muestra con DB_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )
