#!/usr/bin/env python3
"""
Zentrale Logging-Konfiguration für den OPAC-Client
"""

import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_DIR: str = "logs"
LOG_FILE: str = os.path.join(LOG_DIR, "opac.log")
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured: bool = False


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = LOG_FILE) -> None:
    """
    Konfiguriert das Root-Logging mit Konsolen- und Datei-Handler.

    Args:
        level: Log-Level als String (z.B. "DEBUG"). Ohne Angabe wird
            die Umgebungsvariable LOG_LEVEL verwendet (default: INFO).
        log_file: Pfad der Log-Datei oder None für reines Konsolen-Logging
    """
    global _configured

    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)

    if _configured:
        return

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # urllib3 ist sonst sehr gesprächig
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Gibt einen Modul-Logger zurück.

    Args:
        name: Name des Loggers, üblicherweise __name__

    Returns:
        Logger-Instanz
    """
    return logging.getLogger(name)
