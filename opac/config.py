#!/usr/bin/env python3
"""
Bibliothekskonfiguration

Eine Bibliothek wird durch ein JSON-Objekt beschrieben:

    {
      "baseurl": "https://katalog.bibo-dresden.de/webOPACClient",
      "branches": ["Zentralbibliothek", "Neustadt"],
      "city": "Dresden",
      "country": "Deutschland",
      "geo": [51.05, 13.74],
      "id": 1,
      "login": true,
      "system": "sisis",
      "title": "Städtische Bibliotheken Dresden",
      "website": "https://www.bibo-dresden.de"
    }

Die Konfiguration kann aus einer lokalen Datei oder einer URL geladen
werden. Über .env bzw. Umgebungsvariablen:

    OPAC_CONFIG     Pfad oder URL der JSON-Datei
    OPAC_BASE_URL   überschreibt baseurl
"""

import os
import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
from dotenv import load_dotenv

from opac.errors import InvalidURLError, LibraryUnavailableError
from utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL: str = "https://katalog.bibo-dresden.de/webOPACClient"


class LibrarySystem(Enum):
    SISIS_SUNRISE = "sisis"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: Optional[str]) -> "LibrarySystem":
        return cls.SISIS_SUNRISE if value == cls.SISIS_SUNRISE.value else cls.UNKNOWN


@dataclass(frozen=True)
class LibraryConfig:
    """Metadaten und Basis-URL einer Bibliothek."""

    baseurl: str
    branches: List[str] = field(default_factory=list)
    city: str = ""
    country: str = ""
    geo: List[float] = field(default_factory=list)
    id: int = 0
    login: bool = False
    system: LibrarySystem = LibrarySystem.SISIS_SUNRISE
    title: str = ""
    website: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LibraryConfig":
        """
        Erzeugt eine Konfiguration aus einem JSON-Dictionary.

        Raises:
            InvalidURLError: Wenn baseurl fehlt oder keine http(s)-URL ist
        """
        baseurl = (data.get("baseurl") or "").strip().rstrip("/")
        if not _is_http_url(baseurl):
            raise InvalidURLError(f"Ungültige baseurl in Bibliothekskonfiguration: '{baseurl}'")

        return cls(
            baseurl=baseurl,
            branches=list(data.get("branches") or []),
            city=data.get("city", ""),
            country=data.get("country", ""),
            geo=[float(value) for value in data.get("geo") or []],
            id=int(data.get("id", 0)),
            login=bool(data.get("login", False)),
            system=LibrarySystem.from_value(data.get("system")),
            title=data.get("title", ""),
            website=data.get("website", ""),
        )

    @property
    def host(self) -> str:
        """Schema und Host der baseurl, z.B. "https://katalog.bibo-dresden.de"."""
        parsed = urlparse(self.baseurl)
        return f"{parsed.scheme}://{parsed.netloc}"

    def branch_name(self, index: int) -> str:
        """Name der Zweigstelle mit dem gegebenen Index oder "" falls unbekannt."""
        if 0 <= index < len(self.branches):
            return self.branches[index]
        return ""


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def default_library_config() -> LibraryConfig:
    """Eingebaute Konfiguration der Städtischen Bibliotheken Dresden."""
    return LibraryConfig(
        baseurl=DEFAULT_BASE_URL,
        branches=["Zentralbibliothek", "Neustadt"],
        city="Dresden",
        country="Deutschland",
        geo=[51.0504, 13.7373],
        id=1,
        login=True,
        system=LibrarySystem.SISIS_SUNRISE,
        title="Städtische Bibliotheken Dresden",
        website="https://www.bibo-dresden.de",
    )


def load_library_config(source: str, timeout: int = 10) -> LibraryConfig:
    """
    Lädt eine Bibliothekskonfiguration aus Datei oder URL.

    Args:
        source: Lokaler Pfad oder http(s)-URL einer JSON-Datei
        timeout: Timeout für den Download in Sekunden

    Returns:
        LibraryConfig

    Raises:
        LibraryUnavailableError: Datei/URL nicht lesbar, kein gültiges JSON
            oder Felder mit falschem Typ (z.B. id="abc")
        InvalidURLError: baseurl in der Konfiguration ungültig
    """
    try:
        if _is_http_url(source):
            logger.info(f"Lade Bibliothekskonfiguration von {source}")
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        else:
            logger.info(f"Lade Bibliothekskonfiguration aus {source}")
            with open(source, "r", encoding="utf-8") as f:
                data = json.load(f)
    except (OSError, ValueError, requests.exceptions.RequestException) as e:
        logger.error(f"Konfiguration '{source}' konnte nicht geladen werden: {e}")
        raise LibraryUnavailableError(f"Konfiguration '{source}' konnte nicht geladen werden") from e

    if not isinstance(data, dict):
        raise LibraryUnavailableError(f"Konfiguration '{source}' ist kein JSON-Objekt")

    try:
        return LibraryConfig.from_dict(data)
    except (AttributeError, TypeError, ValueError) as e:
        logger.error(f"Konfiguration '{source}' enthält ungültige Werte: {e}")
        raise LibraryUnavailableError(f"Konfiguration '{source}' enthält ungültige Werte") from e


def config_from_env() -> LibraryConfig:
    """
    Bestimmt die Konfiguration aus Umgebungsvariablen (.env wird geladen).

    OPAC_CONFIG wählt die Konfigurationsquelle, OPAC_BASE_URL überschreibt
    anschließend die baseurl. Ohne beide wird Dresden verwendet.
    """
    load_dotenv()

    source = os.getenv("OPAC_CONFIG")
    config = load_library_config(source) if source else default_library_config()

    base_url = os.getenv("OPAC_BASE_URL")
    if base_url:
        base_url = base_url.strip().rstrip("/")
        if not _is_http_url(base_url):
            raise InvalidURLError(f"OPAC_BASE_URL ist keine gültige URL: '{base_url}'")
        logger.debug(f"baseurl aus OPAC_BASE_URL: {base_url}")
        config = replace(config, baseurl=base_url)

    return config
