#!/usr/bin/env python3
"""
Parser für SISIS-WebOPAC-Seiten

Öffentliche Einstiegspunkte der Extraktion:

    parse_search_results(html)              -> List[MediaRecord]
    parse_detailed_media_info(html, id)     -> Optional[DetailedMediaRecord]
    parse_availability(html)                -> List[ItemAvailability]
    extract_session_data(html, cookies)     -> Optional[SessionData]

Nur diese Funktionen werfen DocumentParseError (HTML nicht lesbar). Fehlende
Felder führen nie zu Exceptions, sondern zu "", [] oder None.
"""

from typing import Any, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag

from opac.detail import extract_detailed_record, extract_item_availability
from opac.errors import DocumentParseError
from opac.extractors import (
    extract_author,
    extract_basic_availability,
    extract_id,
    extract_media_type,
    extract_title,
    extract_year,
    is_ui_text,
)
from opac.models import DetailedMediaRecord, ItemAvailability, MediaRecord, SessionData
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Erster Selektor mit mindestens einem Treffer gewinnt
RESULT_ROW_SELECTORS: Tuple[str, ...] = (
    "div.resultRow",
    "tr.resultRow",
    ".result-item",
    "table.data tr",
    "tbody tr",
    "tr[class*='result']",
    "div[class*='result']",
    ".titleData",
    "tr.titleData",
)

SESSION_FIELD_SELECTOR: str = "input[name=CSId]"
SESSION_COOKIE_NAME: str = "USERSESSIONID"


def parse_document(html: str) -> BeautifulSoup:
    """
    Parst HTML zu einem BeautifulSoup-Dokument.

    Raises:
        DocumentParseError: Wenn die Eingabe kein String ist oder vom
            Parser abgelehnt wird
    """
    if not isinstance(html, str):
        raise DocumentParseError(f"HTML muss ein String sein, nicht {type(html).__name__}")
    try:
        return BeautifulSoup(html, "html.parser")
    except (ParserRejectedMarkup, TypeError, ValueError) as e:
        raise DocumentParseError(f"HTML konnte nicht geparst werden: {e}") from e


def locate_rows(soup: BeautifulSoup, selectors: Sequence[str] = RESULT_ROW_SELECTORS) -> List[Tag]:
    """
    Findet die Ergebniszeilen einer Trefferliste.

    Args:
        soup: Geparstes Dokument
        selectors: Geordnete CSS-Selektoren

    Returns:
        Treffer des ersten Selektors, der überhaupt etwas findet, sonst []
    """
    for selector in selectors:
        rows = soup.select(selector)
        if rows:
            logger.debug(f"Selektor '{selector}' liefert {len(rows)} Zeilen")
            return rows
    logger.info("Keine Ergebniszeilen gefunden")
    return []


def assemble_record(row: Tag, index: int = 0) -> Optional[MediaRecord]:
    """
    Baut aus einer Ergebniszeile einen MediaRecord.

    Zeilen ohne Titel, mit UI-Text als Titel oder mit Titel == Autor
    werden übersprungen (None).
    """
    title = extract_title(row)
    if not title or is_ui_text(title):
        logger.debug(f"Zeile {index}: kein gültiger Titel - übersprungen")
        return None

    author = extract_author(row)
    if author == title:
        logger.warning(f"Zeile {index}: Titel gleich Autor ('{title}') - übersprungen")
        return None

    try:
        record = MediaRecord(
            title=title,
            author=author,
            year=extract_year(row),
            media_type=extract_media_type(row),
            id=extract_id(row),
            availability=extract_basic_availability(row),
        )
    except ValueError as e:
        logger.warning(f"Zeile {index}: {e} - übersprungen")
        return None

    logger.debug(f"Zeile {index}: '{record.title}' / '{record.author}' ({record.year})")
    return record


def parse_search_results(html: str) -> List[MediaRecord]:
    """
    Extrahiert alle Treffer aus einer Trefferliste.

    Args:
        html: HTML der Ergebnisseite

    Returns:
        Liste von MediaRecord in Dokumentreihenfolge, ggf. leer

    Example:
        >>> records = parse_search_results(html)
        >>> records[0].title
        'Der Titel des Buches'
    """
    soup = parse_document(html)
    rows = locate_rows(soup)

    records: List[MediaRecord] = []
    for index, row in enumerate(rows):
        record = assemble_record(row, index)
        if record is not None:
            records.append(record)

    logger.info(f"{len(records)} Treffer aus {len(rows)} Zeilen extrahiert")
    return records


def parse_detailed_media_info(html: str, media_id: str) -> Optional[DetailedMediaRecord]:
    """
    Extrahiert die Detailansicht eines Mediums.

    Returns:
        DetailedMediaRecord oder None, wenn die Seite keinen Titel enthält
    """
    soup = parse_document(html)
    return extract_detailed_record(soup, html, media_id)


def parse_availability(html: str) -> List[ItemAvailability]:
    """Exemplar-Verfügbarkeiten einer Detailseite (mindestens ein Eintrag)."""
    soup = parse_document(html)
    return extract_item_availability(soup)


def _cookie_value(cookies: Any, name: str) -> Optional[str]:
    """Liest ein Cookie aus einem RequestsCookieJar, dict oder einer Cookie-Liste."""
    if not cookies:
        return None
    if isinstance(cookies, dict):
        return cookies.get(name) or None
    # Ein Cookie-Jar kann denselben Namen für mehrere Pfade enthalten
    for cookie in cookies:
        if getattr(cookie, "name", None) == name:
            return getattr(cookie, "value", None) or None
    return None


def extract_session_data(html: str, cookies: Any = None) -> Optional[SessionData]:
    """
    Liest die Session-ID aus der Startseite.

    Zuerst das versteckte Feld "CSId", dann das Cookie USERSESSIONID.

    Args:
        html: HTML der Startseite
        cookies: Cookie-Container der HTTP-Antwort (wird unverändert übernommen)

    Returns:
        SessionData oder None, wenn keine Session-ID gefunden wurde
    """
    soup = parse_document(html)

    field = soup.select_one(SESSION_FIELD_SELECTOR)
    if field is not None:
        session_id = (field.get("value") or "").strip()
        if session_id:
            return SessionData(session_id=session_id, cookies=cookies)

    session_id = _cookie_value(cookies, SESSION_COOKIE_NAME)
    if session_id:
        logger.debug("Session-ID aus Cookie übernommen")
        return SessionData(session_id=session_id, cookies=cookies)

    logger.warning("Keine Session-ID gefunden")
    return None
