#!/usr/bin/env python3
"""
Extraktion der SISIS-Detailansicht (singleHit.do)

Aus einer vollständigen Detailseite werden der Basisdatensatz, die
Exemplar-Verfügbarkeiten und ergänzende bibliografische Angaben gelesen.
Die Ergänzungen sind als Tabelle aus (Feld, Regex) beschrieben und werden
unabhängig voneinander über extract_labeled() ausgewertet.
"""

import re
from datetime import date
from typing import Dict, List, Optional, Pattern, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from opac.availability import DEFAULT_AVAILABILITY, AvailabilityStatus, classify, classify_or_default
from opac.extractors import (
    AUTHOR_MARKERS,
    STATUS_ELEMENT_SELECTOR,
    find_years,
    fragment_text,
    is_ui_text,
    is_valid_author_name,
    normalize_whitespace,
    split_lines,
    strip_marker,
)
from opac.models import MARKER_CHAR, DetailedMediaRecord, ItemAvailability, MediaRecord
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Seitenspezifische Klassen zuerst, generische Tags zuletzt
TITLE_SELECTORS: Tuple[str, ...] = (
    ".maintitle",
    ".title",
    "td.title",
    "span.title",
    "[class*=title]",
    "h1",
    "h2",
    "h3",
    "strong",
    "b",
)

TITLE_SUFFIXES: Tuple[str, ...] = (" [Elektronische Ressource]", " [Online-Ressource]")

AUTHOR_SELECTOR: str = ".author, .verfasser, [class*=author]"
AUTHOR_LABELS: Tuple[str, ...] = ("Verfasser", "Author")
AUTHOR_ROLE_LABELS: Pattern[str] = re.compile(r"^(?:Verfasser|Author)\s*:?\s*", re.IGNORECASE)
# Inhaltsblöcke, die im breiten Autoren-Scan übersprungen werden
CONTENT_CLASSES: Tuple[str, ...] = ("description", "toc", "subject", "notes")

YEAR_SELECTOR: str = ".year, .erscheinungsjahr, [class*=year], [class*=jahr]"
YEAR_LABELS: Tuple[str, ...] = ("Erscheinungsjahr", "Jahr")

DETAIL_YEAR_MIN: int = 1800
DETAIL_YEAR_MAX: int = 2030

DETAIL_YEAR_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\b(20\d{2}|19\d{2})\b"),
    re.compile(r"\[(\d{4})\]"),
    re.compile(r"(?<!\d)(\d{4})(?!\d)"),
)

MEDIA_TYPE_SELECTOR: str = ".mediatype, .medientyp, img[alt]"

AVAILABILITY_ROW_SELECTOR: str = "tr[class*=exemplar i], tr[class*=availability i]"
GENERAL_LOCATION: str = "Bibliothek"

DUE_DATE_PATTERN: Pattern[str] = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")
RESERVATION_PATTERN: Pattern[str] = re.compile(r"(\d+)\s*Vormerkung", re.IGNORECASE)

_FLAGS = re.IGNORECASE | re.DOTALL


def _container(class_fragment: str) -> str:
    return rf'<div[^>]*class="[^"]*{class_fragment}[^"]*"[^>]*>(.*?)</div>'


DESCRIPTION_PATTERN: str = _container("description")
TOC_PATTERN: str = _container("toc")
SUBJECTS_PATTERN: str = _container("subject")
NOTES_PATTERN: str = _container("notes")

EDITION_PATTERN: str = r"Auflage[:\s]*([^<\n]+)"
PHYSICAL_DESCRIPTION_PATTERN: str = r"Umfang[:\s]*([^<\n]+)"
LANGUAGE_PATTERN: str = r"Sprache[:\s]*([^<\n]+)"
COVER_IMAGE_PATTERN: Pattern[str] = re.compile(r'<img[^>]*src="([^"]*cover[^"]*)"[^>]*>', re.IGNORECASE)

# Schlüssel in additional_info -> Muster
ADDITIONAL_INFO_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("ISBN", r"ISBN[:\s]*([0-9\-X]+)"),
    ("Verlag", r"Verlag[:\s]*([^<\n]+)"),
)

_LIST_SEPARATOR: Pattern[str] = re.compile(r"<br\s*/?>|\n", re.IGNORECASE)


# ============================================================================
# Label/Wert-Extraktion
# ============================================================================


def _labeled_matches(html: str, pattern: str):
    return re.finditer(pattern, html, _FLAGS)


def extract_labeled(html: str, pattern: str) -> Optional[str]:
    """
    Wendet ein Muster mit einer Capture-Gruppe auf das HTML an.

    Der erste Treffer, dessen Gruppe nach Entfernen von Tags noch Text
    enthält, wird zurückgegeben (Whitespace normalisiert, führende
    Doppelpunkte entfernt).

    Args:
        html: Vollständiges HTML der Detailseite
        pattern: Regex mit genau einer Capture-Gruppe

    Returns:
        Bereinigter Wert oder None

    Example:
        >>> extract_labeled("<p>Sprache: Deutsch</p>", LANGUAGE_PATTERN)
        'Deutsch'
    """
    for match in _labeled_matches(html, pattern):
        value = fragment_text(match.group(1)).lstrip(":").strip()
        if value:
            return value
    return None


def extract_labeled_list(html: str, pattern: str, separator: Optional[str] = None) -> List[str]:
    """
    Wie extract_labeled(), liefert aber eine Liste.

    Ohne separator wird der Rohinhalt an Zeilenumbrüchen (<br>, \\n)
    geteilt, sonst der bereinigte Text am angegebenen Trennzeichen.
    """
    for match in _labeled_matches(html, pattern):
        raw = match.group(1)
        if separator is None:
            parts = [fragment_text(part) for part in _LIST_SEPARATOR.split(raw)]
        else:
            parts = [part.strip() for part in fragment_text(raw).split(separator)]
        items = [part for part in parts if part]
        if items:
            return items
    return []


def extract_cover_image_urls(html: str) -> List[str]:
    """Alle Bild-URLs, deren src "cover" enthält, in Dokumentreihenfolge."""
    return COVER_IMAGE_PATTERN.findall(html)


def extract_additional_info(html: str) -> Dict[str, str]:
    info: Dict[str, str] = {}
    for key, pattern in ADDITIONAL_INFO_PATTERNS:
        value = extract_labeled(html, pattern)
        if value:
            info[key] = value
    return info


# ============================================================================
# Basisdatensatz
# ============================================================================


def clean_title(title: str) -> str:
    """Entfernt Format-Annotationen und das führende "¬"."""
    clean = normalize_whitespace(title)
    for suffix in TITLE_SUFFIXES:
        clean = clean.replace(suffix, "")
    return strip_marker(clean)


def extract_detail_title(soup: BeautifulSoup) -> str:
    for selector in TITLE_SELECTORS:
        for element in soup.select(selector):
            candidate = clean_title(element.get_text(" "))
            if candidate and not is_ui_text(candidate):
                logger.debug(f"Titel über '{selector}' gefunden: {candidate}")
                return candidate
    return ""


def _author_from_cell(cell: Tag) -> str:
    for line in split_lines(cell.decode_contents()):
        stripped = line
        for marker in AUTHOR_MARKERS:
            stripped = stripped.replace(marker, "")
        text = fragment_text(stripped).replace(MARKER_CHAR, "").strip()
        text = AUTHOR_ROLE_LABELS.sub("", text).strip()
        if text and is_valid_author_name(text):
            return text
    return ""


def _in_content_block(element: Tag) -> bool:
    for node in [element, *element.parents]:
        classes = " ".join(node.get("class") or []).lower()
        if any(name in classes for name in CONTENT_CLASSES):
            return True
    return False


def extract_detail_author(soup: BeautifulSoup, title: str) -> str:
    """
    Sucht den Verfasser auf der Detailseite.

    Reihenfolge: Autor-Klassen, Tabellenzellen mit "Verfasser"/"Author",
    zuletzt ein breiter Scan über table/div/span.
    """
    for element in soup.select(AUTHOR_SELECTOR):
        candidate = strip_marker(normalize_whitespace(element.get_text(" ")))
        candidate = candidate.replace(MARKER_CHAR, "").strip()
        if candidate and candidate != title and is_valid_author_name(candidate):
            return candidate

    for cell in soup.select("td"):
        cell_html = cell.decode_contents()
        if not any(label in cell_html for label in AUTHOR_LABELS):
            continue
        candidate = _author_from_cell(cell)
        if not candidate:
            # Label und Wert stehen oft in benachbarten Zellen
            sibling = cell.find_next_sibling("td")
            candidate = _author_from_cell(sibling) if sibling is not None else ""
        if candidate and candidate != title:
            return candidate

    for element in soup.select("table, div, span"):
        if _in_content_block(element):
            continue
        candidate = normalize_whitespace(element.get_text(" ")).replace(MARKER_CHAR, "").strip()
        if candidate and candidate != title and is_valid_author_name(candidate):
            return candidate

    return ""


def extract_detail_year(soup: BeautifulSoup) -> str:
    candidates: List[str] = [element.get_text(" ") for element in soup.select(YEAR_SELECTOR)]

    for cell in soup.select("td, th"):
        if any(label in cell.get_text() for label in YEAR_LABELS):
            candidates.append(cell.get_text(" "))
            sibling = cell.find_next_sibling(["td", "th"])
            if sibling is not None:
                candidates.append(sibling.get_text(" "))

    years = find_years(
        [normalize_whitespace(text) for text in candidates],
        DETAIL_YEAR_PATTERNS,
        DETAIL_YEAR_MIN,
        DETAIL_YEAR_MAX,
    )
    return years[0] if years else ""


def extract_detail_media_type(soup: BeautifulSoup) -> str:
    element = soup.select_one(MEDIA_TYPE_SELECTOR)
    if element is None:
        return ""
    alt = element.get("alt")
    if alt is not None:
        return alt.strip()
    return normalize_whitespace(element.get_text())


# ============================================================================
# Exemplare
# ============================================================================


def parse_due_date(text: str) -> Optional[date]:
    """Erstes Datum im Format TT.MM.JJJJ; ungültige Daten werden ignoriert."""
    for match in DUE_DATE_PATTERN.finditer(text):
        day, month, year = (int(group) for group in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            logger.debug(f"Ungültiges Datum ignoriert: {match.group(0)}")
    return None


def parse_reservation_count(text: str) -> int:
    match = RESERVATION_PATTERN.search(text)
    return int(match.group(1)) if match else 0


def _cell_text(row: Tag, selector: str) -> str:
    cell = row.select_one(selector)
    return normalize_whitespace(cell.get_text(" ")) if cell is not None else ""


def parse_item_row(row: Tag) -> ItemAvailability:
    """Liest ein Exemplar aus einer Tabellenzeile der Detailansicht."""
    row_text = normalize_whitespace(row.get_text(" "))

    location = _cell_text(row, "td[class*=location]") or _cell_text(row, "td")
    call_number = _cell_text(row, "td[class*=call]") or _cell_text(row, "td[class*=signatur]")
    branch = _cell_text(row, "td[class*=branch]") or _cell_text(row, "td[class*=zweigstelle]")
    status_note = _cell_text(row, "td[class*=status]")

    status = classify(status_note) or classify_or_default(row_text)

    return ItemAvailability(
        status=status,
        location=location,
        call_number=call_number,
        due_date=parse_due_date(row_text),
        reservation_count=parse_reservation_count(row_text),
        status_note=status_note or None,
        branch=branch or None,
    )


def _general_status(soup: BeautifulSoup) -> AvailabilityStatus:
    for element in soup.select(STATUS_ELEMENT_SELECTOR):
        status = classify(normalize_whitespace(element.get_text(" ")))
        if status:
            return status
    for image in soup.select("img[alt]"):
        status = classify(image.get("alt"))
        if status:
            return status
    return DEFAULT_AVAILABILITY


def extract_item_availability(soup: BeautifulSoup) -> List[ItemAvailability]:
    """
    Exemplar-Verfügbarkeiten einer Seite.

    Ohne strukturierte Exemplarzeilen wird ein einzelner allgemeiner
    Eintrag erzeugt. Dessen Status stammt nur aus Status-Elementen und
    alt-Texten von Bildern, nie aus Titel oder Beschreibung.
    """
    items = [parse_item_row(row) for row in soup.select(AVAILABILITY_ROW_SELECTOR)]
    if items:
        logger.debug(f"{len(items)} Exemplarzeilen gefunden")
        return items

    status = _general_status(soup)
    logger.debug(f"Keine Exemplarzeilen - allgemeiner Status: {status.value}")
    return [ItemAvailability(status=status, location=GENERAL_LOCATION)]


# ============================================================================
# Gesamte Detailseite
# ============================================================================


def extract_detailed_record(soup: BeautifulSoup, html: str, media_id: str) -> Optional[DetailedMediaRecord]:
    """
    Baut den vollständigen Detaildatensatz.

    Args:
        soup: Geparstes Dokument
        html: Rohes HTML (für die Regex-basierten Ergänzungen)
        media_id: Bereits bekannte ID des Mediums

    Returns:
        DetailedMediaRecord oder None, wenn kein Titel gefunden wurde
    """
    title = extract_detail_title(soup)
    if not title:
        logger.warning(f"Kein Titel auf Detailseite für ID '{media_id}'")
        return None

    author = extract_detail_author(soup, title)
    availability = extract_item_availability(soup)

    basic_info = MediaRecord(
        title=title,
        author=author,
        year=extract_detail_year(soup),
        media_type=extract_detail_media_type(soup),
        id=media_id,
        availability=availability[0].status if availability else DEFAULT_AVAILABILITY,
    )

    return DetailedMediaRecord(
        basic_info=basic_info,
        description=extract_labeled(html, DESCRIPTION_PATTERN),
        table_of_contents=extract_labeled_list(html, TOC_PATTERN),
        subjects=extract_labeled_list(html, SUBJECTS_PATTERN, separator=";"),
        availability=availability,
        additional_info=extract_additional_info(html),
        cover_image_urls=extract_cover_image_urls(html),
        edition=extract_labeled(html, EDITION_PATTERN),
        physical_description=extract_labeled(html, PHYSICAL_DESCRIPTION_PATTERN),
        language=extract_labeled(html, LANGUAGE_PATTERN),
        notes=extract_labeled_list(html, NOTES_PATTERN),
    )
