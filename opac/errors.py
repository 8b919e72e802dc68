#!/usr/bin/env python3
"""
Fehlerklassen für den OPAC-Client

Die Extraktion selbst wirft nur zwei Fehler: DocumentParseError, wenn das
HTML gar nicht als Dokument gelesen werden kann, und ParsingFailedError,
wenn auf einer Detailseite kein Titel gefunden wird. Alle übrigen Klassen
werden vom Service-Layer (HTTP, Session, Query) verwendet.
"""

import re
from functools import lru_cache
from typing import Optional

from utils.logging_config import get_logger

logger = get_logger(__name__)

SEVERITY_CRITICAL = "critical"
SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"

CATEGORY_VALIDATION = "validation"
CATEGORY_NETWORK = "network"
CATEGORY_DATA = "data"
CATEGORY_AUTHENTICATION = "authentication"
CATEGORY_AVAILABILITY = "availability"
CATEGORY_SEARCH = "search"
CATEGORY_SYSTEM = "system"


@lru_cache(maxsize=100)
def _logging_description(class_name: str, message: str) -> str:
    return f"{class_name}: {message}" if message else class_name


class OPACError(Exception):
    """
    Basisklasse aller Fehler des OPAC-Clients.

    Unterklassen legen Schweregrad, Kategorie und Wiederholbarkeit
    als Klassenattribute fest.
    """

    default_message: str = "Unbekannter Fehler"
    severity: str = SEVERITY_INFO
    category: str = CATEGORY_SYSTEM
    retryable: bool = False

    def __init__(self, message: Optional[str] = None) -> None:
        self.message: str = message or self.default_message
        super().__init__(self.message)

    @property
    def identifier(self) -> str:
        """Stabiler, maschinenlesbarer Bezeichner des Fehlers."""
        name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", type(self).__name__)
        name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name).lower()
        return name[: -len("_error")] if name.endswith("_error") else name

    def suggested_retry_delay(self, attempt: int) -> Optional[float]:
        """
        Wartezeit in Sekunden vor dem nächsten Versuch.

        Args:
            attempt: Nummer des bisherigen Versuchs (0-basiert)

        Returns:
            Sekunden oder None, wenn der Fehler nicht wiederholbar ist
        """
        return None

    def log_error(self) -> None:
        """Loggt den Fehler mit einem zum Schweregrad passenden Level."""
        description = _logging_description(type(self).__name__, self.message)
        if self.severity in (SEVERITY_CRITICAL, SEVERITY_ERROR):
            logger.error(description)
        elif self.severity == SEVERITY_WARNING:
            logger.warning(description)
        else:
            logger.info(description)


# --- Anfrage- und Konfigurationsfehler ---------------------------------------


class InvalidRequestError(OPACError):
    default_message = "Ungültige Anfrage"
    category = CATEGORY_VALIDATION


class InvalidURLError(OPACError):
    default_message = "Ungültige URL"
    category = CATEGORY_VALIDATION


class InvalidMediaIdError(InvalidRequestError):
    default_message = "Ungültige Medien-ID"


# --- Netzwerk und Kommunikation ----------------------------------------------


class NetworkError(OPACError):
    default_message = "Netzwerkfehler"
    severity = SEVERITY_ERROR
    category = CATEGORY_NETWORK
    retryable = True

    def suggested_retry_delay(self, attempt: int) -> Optional[float]:
        return float(min(20, 2**attempt))


class SessionError(OPACError):
    default_message = "Session mit dem OPAC-Server konnte nicht aufgebaut werden"
    severity = SEVERITY_ERROR
    category = CATEGORY_AUTHENTICATION


class ServiceUnavailableError(OPACError):
    default_message = "OPAC-Dienst ist vorübergehend nicht erreichbar"
    severity = SEVERITY_WARNING
    category = CATEGORY_AVAILABILITY
    retryable = True

    def suggested_retry_delay(self, attempt: int) -> Optional[float]:
        return float(min(60, 5 * 2**attempt))


class RequestTimeoutError(OPACError):
    default_message = "Zeitüberschreitung der Anfrage"
    severity = SEVERITY_WARNING
    category = CATEGORY_NETWORK
    retryable = True

    def __init__(self, timeout: Optional[float] = None, message: Optional[str] = None) -> None:
        self.timeout = timeout
        if message is None and timeout is not None:
            message = f"Zeitüberschreitung nach {timeout} Sekunden"
        super().__init__(message)

    def suggested_retry_delay(self, attempt: int) -> Optional[float]:
        return float(min(30, 2 * (attempt + 1)))


class RateLimitExceededError(OPACError):
    default_message = "Zu viele Anfragen"
    severity = SEVERITY_WARNING
    category = CATEGORY_NETWORK
    retryable = True

    def __init__(self, retry_after: Optional[float] = None, message: Optional[str] = None) -> None:
        self.retry_after = retry_after
        if message is None and retry_after is not None:
            message = f"Zu viele Anfragen, erneut versuchen nach {retry_after} Sekunden"
        super().__init__(message)

    def suggested_retry_delay(self, attempt: int) -> Optional[float]:
        if self.retry_after is not None:
            return float(self.retry_after)
        return float(min(300, 5 * (attempt + 1)))


# --- Daten und Parsing -------------------------------------------------------


class DocumentParseError(OPACError):
    """Das HTML konnte nicht als Dokument geparst werden."""

    default_message = "HTML-Dokument konnte nicht geparst werden"
    severity = SEVERITY_WARNING
    category = CATEGORY_DATA


class ParsingFailedError(OPACError):
    """Pflichtfelder (Titel) der Detailseite fehlen."""

    default_message = "Serverantwort konnte nicht ausgewertet werden"
    severity = SEVERITY_WARNING
    category = CATEGORY_DATA


class InvalidResponseError(OPACError):
    default_message = "Unerwartete Antwort des Servers"
    severity = SEVERITY_WARNING
    category = CATEGORY_DATA


class NoResultsFoundError(OPACError):
    default_message = "Keine Treffer für die Suchanfrage"
    category = CATEGORY_SEARCH


# --- Bibliothek und Katalog --------------------------------------------------


class LibraryUnavailableError(OPACError):
    default_message = "Bibliothek nicht verfügbar"
    category = CATEGORY_AVAILABILITY


class UnsupportedSearchCategoryError(OPACError):
    default_message = "Suchkategorie wird nicht unterstützt"
    category = CATEGORY_SEARCH


class InternalError(OPACError):
    default_message = "Interner Fehler"
    severity = SEVERITY_CRITICAL
    category = CATEGORY_SYSTEM

    def __init__(self, component: str, details: str) -> None:
        self.component = component
        self.details = details
        super().__init__(f"Interner Fehler in {component}: {details}")
