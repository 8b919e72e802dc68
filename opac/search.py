#!/usr/bin/env python3
"""
SISIS-WebOPAC Suche
Client für die Katalogsuche in SISIS-SunRise-Bibliotheken (webOPACClient)

Ablauf einer Suche:

    1. start.do aufrufen -> Session-ID (CSId) und Cookies
    2. Parameter aus der SearchQuery bauen
    3. search.do aufrufen
    4. Trefferliste parsen
"""

import time
import random
import urllib.parse
from typing import Any, List, Optional

import requests

from opac.config import LibraryConfig, default_library_config
from opac.errors import (
    InternalError,
    InvalidMediaIdError,
    InvalidRequestError,
    InvalidResponseError,
    NetworkError,
    NoResultsFoundError,
    OPACError,
    ParsingFailedError,
    RateLimitExceededError,
    RequestTimeoutError,
    ServiceUnavailableError,
    SessionError,
)
from opac.extractors import DETAIL_ENDPOINT, DETAIL_PATH_PREFIX
from opac.models import DetailedMediaRecord, ItemAvailability, MediaRecord, SessionData
from opac.parsers import extract_session_data, parse_availability, parse_detailed_media_info, parse_search_results
from opac.query import SearchCategory, SearchQuery, SearchTerm
from utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_ATTEMPTS: int = 3
DEFAULT_TIMEOUT: int = 15

USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/91.0.4472.124 Safari/537.36"
)


def _retry_after(response: Optional[requests.Response]) -> Optional[float]:
    if response is None:
        return None
    value = response.headers.get("Retry-After")
    if value and value.strip().isdigit():
        return float(value.strip())
    return None


class OPACService:
    """Suchengine für einen SISIS-WebOPAC."""

    def __init__(self, config: Optional[LibraryConfig] = None, timeout: int = DEFAULT_TIMEOUT) -> None:
        """
        Initialisiert den Client mit Bibliothekskonfiguration und Session.

        Args:
            config: Konfiguration der Bibliothek (default: Dresden)
            timeout: Timeout pro Request in Sekunden
        """
        self.config: LibraryConfig = config or default_library_config()
        self.base_url: str = self.config.baseurl
        self.timeout: int = timeout
        self.session: requests.Session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def safe_get(self, url: str, **kwargs: Any) -> requests.Response:
        """
        Sendet einen GET-Request mit automatischen Retries und Backoff.

        Nur 429 und 503 werden wiederholt, alle anderen Fehler werden sofort
        in die passende OPACError-Unterklasse übersetzt.

        Args:
            url: Die Ziel-URL für den GET-Request
            **kwargs: Zusätzliche Argumente für session.get()

        Returns:
            Response-Objekt des erfolgreichen Requests

        Raises:
            RateLimitExceededError: 429 nach drei Versuchen
            ServiceUnavailableError: 503 nach drei Versuchen
            RequestTimeoutError: Zeitüberschreitung
            NetworkError: Verbindungsfehler
            InvalidResponseError: Andere HTTP-Fehlerstatus
        """
        kwargs.setdefault("timeout", self.timeout)
        last_error: Optional[OPACError] = None

        for attempt in range(MAX_ATTEMPTS):
            try:
                response = self.session.get(url, **kwargs)
                response.raise_for_status()
                return response
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status == 429:
                    last_error = RateLimitExceededError(_retry_after(e.response))
                elif status == 503:
                    last_error = ServiceUnavailableError()
                else:
                    raise InvalidResponseError(f"HTTP {status} für URL: {url}") from e

                if attempt < MAX_ATTEMPTS - 1:
                    wait = last_error.suggested_retry_delay(attempt) + random.random() * 3
                    logger.warning(f"Server-Fehler {status}, " f"warte {wait:.1f} Sekunden...")
                    time.sleep(wait)
            except requests.exceptions.Timeout as e:
                raise RequestTimeoutError(kwargs.get("timeout")) from e
            except requests.exceptions.RequestException as e:
                raise NetworkError(f"Fehler beim Zugriff auf {url}: {e}") from e

        logger.error(f"Fehler nach {MAX_ATTEMPTS} Versuchen für URL: {url}")
        last_error.log_error()
        raise last_error

    def establish_session(self) -> SessionData:
        """
        Ruft die Startseite auf und liest Session-ID und Cookies.

        Raises:
            SessionError: Wenn keine Session-ID gefunden wurde
        """
        start_url = f"{self.base_url}/start.do"
        logger.debug(f"Rufe Startseite auf: {start_url}")

        response = self.safe_get(start_url)
        session_data = extract_session_data(response.text, self.session.cookies)
        if session_data is None:
            raise SessionError(f"Keine Session-ID von {start_url}")

        logger.debug(f"Session-ID: {session_data.session_id}")
        return session_data

    def search(self, search_term: str, category: SearchCategory = SearchCategory.ALL) -> List[MediaRecord]:
        """
        Führt eine einfache Suche im Bibliothekskatalog durch.

        Args:
            search_term: Der Suchbegriff
            category: Suchkategorie (default: alle Felder)

        Returns:
            Liste der gefundenen Medien
        """
        query = SearchQuery(terms=[SearchTerm(search_term, category)])
        return self.advanced_search(query)

    def advanced_search(self, query: SearchQuery, require_results: bool = False) -> List[MediaRecord]:
        """
        Führt eine Suche mit mehreren verknüpften Suchbegriffen durch.

        Args:
            query: Vollständige Suchanfrage
            require_results: NoResultsFoundError statt leerer Liste

        Returns:
            Liste der gefundenen Medien

        Raises:
            InvalidRequestError: Wenn die Anfrage keinen Suchbegriff enthält
            NoResultsFoundError: Nur mit require_results=True
        """
        if not query.is_valid:
            raise InvalidRequestError("Suchanfrage enthält keinen Suchbegriff")

        try:
            logger.info(f"Suche nach: {query}")

            session_data = self.establish_session()
            params = query.to_params(session_data.session_id)
            search_url = f"{self.base_url}/search.do"

            response = self.safe_get(search_url, params=params)
            logger.debug(f"Response Length: {len(response.text)} Zeichen")

            logger.info("Starte Parsing der Suchergebnisse...")
            records = parse_search_results(response.text)

        except OPACError as e:
            logger.error(f"Fehler in advanced_search: {e}", exc_info=True)
            raise
        except Exception as e:
            logger.error(f"Unerwarteter Fehler: {e}", exc_info=True)
            raise InternalError("advanced_search", str(e)) from e

        if not records and require_results:
            raise NoResultsFoundError(f"Keine Treffer für {query}")
        return records

    def detail_url(self, media_id: str) -> str:
        """
        Baut die URL der Detailseite aus einer Medien-ID.

        Example:
            >>> service.detail_url("/webOPACClient/singleHit.do?curPos=1")
            'https://katalog.bibo-dresden.de/webOPACClient/singleHit.do?curPos=1'
        """
        media_id = (media_id or "").strip()
        if not media_id:
            raise InvalidMediaIdError("Medien-ID darf nicht leer sein")

        if media_id.startswith(DETAIL_PATH_PREFIX):
            return f"{self.config.host}{media_id}"
        if media_id.startswith(DETAIL_ENDPOINT):
            return f"{self.base_url}/{media_id}"
        # Alte, reine Katalog-IDs
        return f"{self.base_url}/{DETAIL_ENDPOINT}?" + urllib.parse.urlencode({"id": media_id})

    def get_detailed_info(self, media_id: str) -> DetailedMediaRecord:
        """
        Lädt und parst die Detailseite eines Mediums.

        Args:
            media_id: ID bzw. relativer Pfad aus der Trefferliste

        Returns:
            DetailedMediaRecord

        Raises:
            InvalidMediaIdError: Leere ID
            ParsingFailedError: Detailseite ohne erkennbaren Titel
        """
        url = self.detail_url(media_id)
        logger.info(f"Lade Detailseite: {url}")

        response = self.safe_get(url)
        record = parse_detailed_media_info(response.text, media_id)
        if record is None:
            error = ParsingFailedError(f"Kein Titel auf der Detailseite für '{media_id}'")
            error.log_error()
            raise error
        return record

    def get_availability(self, media_id: str) -> List[ItemAvailability]:
        """Exemplar-Verfügbarkeiten eines Mediums."""
        response = self.safe_get(self.detail_url(media_id))
        return parse_availability(response.text)

    @staticmethod
    def display_results(results: List[MediaRecord]) -> None:
        """
        Zeigt die Suchergebnisse formatiert an.

        Args:
            results: Liste der Suchergebnisse
        """
        if not results:
            logger.info("Keine Ergebnisse gefunden.")
            return

        logger.info(f"\n{len(results)} Ergebnisse gefunden:\n")
        print("-" * 100)

        for i, result in enumerate(results, 1):
            print(f"{i}. {result.title}")
            if result.author:
                print(f"   Autor: {result.author}")
            if result.year:
                print(f"   Jahr: {result.year}")
            if result.media_type:
                print(f"   Medientyp: {result.media_type}")
            print(f"   Status: {result.availability.localized_description}")
            if result.id:
                print(f"   ID: {result.id}")
            print("-" * 100)

    @staticmethod
    def display_details(record: DetailedMediaRecord) -> None:
        """Zeigt eine Detailansicht inklusive Exemplaren an."""
        info = record.basic_info
        print("=" * 100)
        print(info.title)
        if info.author:
            print(f"   Autor: {info.author}")
        if info.year:
            print(f"   Jahr: {info.year}")
        for key, value in record.additional_info.items():
            print(f"   {key}: {value}")
        if record.edition:
            print(f"   Auflage: {record.edition}")
        if record.language:
            print(f"   Sprache: {record.language}")
        if record.subjects:
            print(f"   Schlagwörter: {', '.join(record.subjects)}")
        print(f"   Verfügbarkeit: {record.availability_summary}")
        for item in record.availability:
            print(f"     - {item.full_description}")
        print("=" * 100)
