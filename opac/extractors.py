#!/usr/bin/env python3
"""
Feld-Extraktoren für SISIS-Trefferlisten

Jede Funktion arbeitet auf einer einzelnen Ergebniszeile (BeautifulSoup-Tag)
und liefert genau ein Feld. Nicht gefundene Felder sind kein Fehler: die
Extraktoren geben dann "" bzw. den Default zurück.

Aufbau einer typischen Zeile:

    <tr class="resultRow">
      <td><img alt="Buch"/></td>
      <td style="width:100%">
        <a href="singleHit.do?...">¬Der Titel</a><br/>
        Mustermann, Max ¬[Verfasser]<br/>
        Verlag, 2023<br/>
        ISBN: 978-3-...
      </td>
    </tr>
"""

import re
from typing import List, Optional, Pattern, Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag

from opac.availability import DEFAULT_AVAILABILITY, AvailabilityStatus, classify
from opac.models import MARKER_CHAR
from utils.logging_config import get_logger

logger = get_logger(__name__)

DETAIL_ENDPOINT: str = "singleHit.do"
DETAIL_PATH_PREFIX: str = "/webOPACClient/"
TITLE_LINK_SELECTOR: str = f"a[href*='{DETAIL_ENDPOINT}']"
MAIN_CELL_SELECTOR: str = "td[style*='width:100%']"

# Reihenfolge der Zeilenumbruch-Varianten beim Aufteilen des Zelleninhalts
LINE_BREAKS: Tuple[str, ...] = ("<br />", "<br/>", "<br>")

AUTHOR_MARKERS: Tuple[str, ...] = (f"{MARKER_CHAR}[Verfasser]", "[Verfasser]")

UI_KEYWORDS: Tuple[str, ...] = (
    "vormerken",
    "bestellen",
    "vormerken/bestellen",
    "reserve",
    "order",
    "details",
    "ansehen",
    "view",
    "more",
    "weiterlesen",
    "lesen",
    "weiter",
    "zum titel",
    "zur detailansicht",
)

AVAILABILITY_KEYWORDS: Tuple[str, ...] = (
    "verfügbar",
    "ausleihbar",
    "entliehen",
    "vorgemerkt",
    "bestellt",
    "vormerkbar",
    "bestellbar",
    "nicht verfügbar",
    "nicht ausleihbar",
    "status",
    "exemplar",
    "heute zurück",
)

# Teilstrings (kleingeschrieben), die eine Zeile als Nicht-Verfasser markieren
AUTHOR_DENYLIST: Tuple[str, ...] = (
    # Rollen, die keinen Verfasser bezeichnen
    f"{MARKER_CHAR}[komponist",
    f"{MARKER_CHAR}[dirigent",
    "[komponist",
    "[dirigent",
    # Verfügbarkeit
    "verfügbar",
    "ausleihbar",
    "entliehen",
    "vorgemerkt",
    "bestellt",
    "vormerkbar",
    "bestellbar",
    "nicht verfügbar",
    "nicht ausleihbar",
    "heute zurück",
    "heute",
    "zurück",
    # Katalog-Metadaten
    "signatur",
    "standort",
    "zweigstelle",
    "status",
    "mediennummer",
    "exemplar",
    "auflage",
    "seiten",
    "verlag",
    "isbn",
    "issn",
    "barcode",
    # URLs und HTML-Reste
    "http",
    "www.",
    "<",
    ">",
    "/",
    # Medienformate
    "xbox",
    "nintendo",
    "dvd",
    # Themen-Rauschen
    "kinder",
    "blau",
    "spiele",
    "freizeit",
)

# Kurze Kürzel (Systematik, EAN, Formate) nur als eigenständiges Wort
AUTHOR_DENYLIST_TOKENS: Tuple[str, ...] = ("bs", "ean", "ps4", "ps5", "cd", "bd", "lp", "tr")
_DENYLIST_TOKEN_PATTERN: Pattern[str] = re.compile(
    r"(?<![^\W_])(?:" + "|".join(re.escape(token) for token in AUTHOR_DENYLIST_TOKENS) + r")(?![^\W_])"
)

STATUS_NOUNS: Tuple[str, ...] = (
    "status",
    "exemplar",
    "verfügbar",
    "ausleihbar",
    "entliehen",
    "vorgemerkt",
    "bestellt",
    "signatur",
    "standort",
    "mediennummer",
)

MIN_AUTHOR_LENGTH: int = 3
MAX_AUTHOR_LENGTH: int = 100

ROW_YEAR_MIN: int = 1800
ROW_YEAR_MAX: int = 2027

# 2024, [2024], c2024, ©2024, "Verlag, 2024" - erster Treffer gewinnt
ROW_YEAR_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"(?:^|\s|\[|c|©|, )([12]\d{3})(?:\]|\.|\s|$|,)"),
    re.compile(r"\[([12]\d{3})\]"),
    re.compile(r"(?<!\d)([12]\d{3})(?!\d)"),
)

STATUS_ELEMENT_SELECTOR: str = (
    "[class*=status i], [class*=avail i], [class*=verfueg i], [class*=verfüg i], [class*=ausleih i]"
)

_WHITESPACE: Pattern[str] = re.compile(r"\s+")


# ============================================================================
# Hilfsfunktionen
# ============================================================================


def normalize_whitespace(text: Optional[str]) -> str:
    """Fasst Whitespace zusammen und trimmt."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def fragment_text(fragment: str) -> str:
    """
    Wandelt ein HTML-Fragment in reinen Text um.

    Args:
        fragment: HTML-Schnipsel, z.B. eine Zeile aus einer Tabellenzelle

    Returns:
        Text ohne Tags, mit normalisiertem Whitespace
    """
    if not fragment or not fragment.strip():
        return ""
    return normalize_whitespace(BeautifulSoup(fragment, "html.parser").get_text())


def strip_marker(text: str) -> str:
    """Entfernt ein einzelnes führendes "¬"."""
    text = text.strip()
    if text.startswith(MARKER_CHAR):
        return text[1:].strip()
    return text


def split_lines(cell_html: str) -> List[str]:
    """
    Teilt den inneren HTML-Code einer Zelle an Zeilenumbrüchen.

    Die Varianten aus LINE_BREAKS werden der Reihe nach probiert; die erste,
    die mehr als ein Segment ergibt, wird verwendet.
    """
    for separator in LINE_BREAKS:
        lines = cell_html.split(separator)
        if len(lines) > 1:
            return lines
    return [cell_html]


def find_main_cell(row: Tag) -> Optional[Tag]:
    """
    Sucht die Hauptzelle einer Ergebniszeile.

    Bevorzugt wird eine Zelle mit "width:100%" im style-Attribut, sonst die
    zweite Zelle (die erste enthält üblicherweise das Medientyp-Icon).
    """
    cells = row.select("td")
    if len(cells) < 2:
        return None
    return row.select_one(MAIN_CELL_SELECTOR) or cells[1]


# ============================================================================
# Filter
# ============================================================================


def is_ui_text(text: Optional[str]) -> bool:
    """True, wenn der Text Navigations- oder Aktionstext ist ("Vormerken", "Details", ...)."""
    if not text:
        return False
    lower = text.lower()
    return any(keyword in lower for keyword in UI_KEYWORDS)


def is_availability_text(text: Optional[str]) -> bool:
    """True, wenn der Text nach Verfügbarkeits-/Statusinformation aussieht."""
    if not text:
        return False
    lower = text.lower()
    return any(keyword in lower for keyword in AVAILABILITY_KEYWORDS)


def is_valid_author_name(text: Optional[str]) -> bool:
    """
    Prüft, ob ein Text ein plausibler Verfassername ist.

    Abgelehnt werden u.a. Statusangaben, Katalog-Labels (Signatur, Standort,
    ISBN, ...), Komponisten-/Dirigentenangaben, URLs, Formatkürzel und
    reine Klassifikationsnummern.

    Example:
        >>> is_valid_author_name("Mustermann, Max")
        True
        >>> is_valid_author_name("Beethoven ¬[Komponist]")
        False
    """
    clean = (text or "").strip()
    if not (MIN_AUTHOR_LENGTH <= len(clean) <= MAX_AUTHOR_LENGTH):
        return False

    lower = clean.lower()
    if any(pattern in lower for pattern in AUTHOR_DENYLIST):
        return False
    if _DENYLIST_TOKEN_PATTERN.search(lower):
        return False

    # Klassifikationen wie "500.1 - 23"
    if all(c.isdigit() or c.isspace() or c in ".-" for c in clean):
        return False

    if is_ui_text(clean):
        return False

    if not any(c.isalpha() for c in clean):
        return False

    words = clean.split()
    if len(words) == 1 and len(words[0]) < 3:
        return False

    if lower in STATUS_NOUNS:
        return False

    return True


# ============================================================================
# Extraktoren
# ============================================================================


def extract_title(row: Tag) -> str:
    """
    Extrahiert den Titel aus dem Detail-Link der Hauptzelle.

    Returns:
        Bereinigter Titel oder "" (kein Link, leer oder UI-Text)
    """
    main_cell = find_main_cell(row)
    if main_cell is None:
        return ""

    title_link = main_cell.select_one(TITLE_LINK_SELECTOR)
    if title_link is None:
        return ""

    title = strip_marker(normalize_whitespace(title_link.get_text()))
    if not title or is_ui_text(title):
        return ""
    return title


def _clean_author_line(line: str) -> str:
    return fragment_text(line).replace(MARKER_CHAR, "").strip()


def extract_author(row: Tag) -> str:
    """
    Extrahiert den Verfasser aus der Hauptzelle.

    Zuerst werden Zeilen mit explizitem "[Verfasser]"-Marker gesucht. Gibt es
    keinen gültigen Treffer, wird die erste Zeile ohne Link genommen, die als
    Name durchgeht und keine Verfügbarkeitsangabe ist.
    """
    main_cell = find_main_cell(row)
    if main_cell is None:
        return ""

    lines = split_lines(main_cell.decode_contents())

    for line in lines:
        if not any(marker in line for marker in AUTHOR_MARKERS):
            continue
        stripped = line
        for marker in AUTHOR_MARKERS:
            stripped = stripped.replace(marker, "")
        text = _clean_author_line(stripped)
        if text and is_valid_author_name(text):
            return text

    for line in lines:
        if "href" in line or not line.strip():
            continue
        text = _clean_author_line(line)
        if is_valid_author_name(text) and not is_availability_text(text):
            return text

    return ""


def find_years(
    lines: Sequence[str], patterns: Sequence[Pattern[str]], min_year: int, max_year: int
) -> List[str]:
    """
    Sammelt Jahreszahlen aus Textzeilen.

    Pro Zeile wird jedes Muster einmal angewendet (erster Treffer); gültig
    sind Jahre im Bereich [min_year, max_year]. Die Reihenfolge der Liste
    entspricht Zeilen- und Musterreihenfolge.
    """
    found: List[str] = []
    for line in lines:
        for pattern in patterns:
            match = pattern.search(line)
            if not match:
                continue
            year = match.group(1)
            if year.isdigit() and min_year <= int(year) <= max_year:
                found.append(year)
    return found


def extract_year(row: Tag) -> str:
    """Extrahiert das erste plausible Erscheinungsjahr (1800-2027) der Hauptzelle."""
    main_cell = find_main_cell(row)
    if main_cell is None:
        return ""

    lines = [fragment_text(line) for line in split_lines(main_cell.decode_contents())]
    years = find_years(lines, ROW_YEAR_PATTERNS, ROW_YEAR_MIN, ROW_YEAR_MAX)
    return years[0] if years else ""


def extract_media_type(row: Tag) -> str:
    """Medientyp aus dem alt-Text des ersten Bildes in einer Zelle."""
    image = row.select_one("td img")
    if image is None:
        return ""
    return (image.get("alt") or "").strip()


def extract_id(row: Tag) -> str:
    """
    Extrahiert die Kennung eines Treffers.

    Reihenfolge: verstecktes Feld "id", data-id-Attribut, href des
    Detail-Links. Der href wird unverändert übernommen, da er alle
    Parameter für den späteren Abruf der Detailseite enthält.
    """
    hidden = row.select_one("input[name=id]")
    if hidden is not None:
        value = (hidden.get("value") or "").strip()
        if value:
            return value

    data_element = row.select_one("[data-id]")
    if data_element is not None:
        value = (data_element.get("data-id") or "").strip()
        if value:
            return value

    link = row.select_one(TITLE_LINK_SELECTOR)
    if link is not None:
        href = (link.get("href") or "").strip()
        if href.startswith(DETAIL_PATH_PREFIX):
            logger.debug(f"Vollständiger Detailpfad als ID: {href}")
        return href

    return ""


def extract_basic_availability(row: Tag) -> AvailabilityStatus:
    """
    Ermittelt die Verfügbarkeit einer Ergebniszeile.

    Reihenfolge: gesamter Zeilentext, Elemente mit Status-Klassen,
    alt-Texte von Bildern, Text der Hauptzelle. Greift nichts, wird
    optimistisch "ausleihbar" angenommen.
    """
    status = classify(row.get_text(" ", strip=True).lower())
    if status:
        return status

    for element in row.select(STATUS_ELEMENT_SELECTOR):
        status = classify(element.get_text(" ", strip=True))
        if status:
            return status

    for image in row.select("img[alt]"):
        status = classify(image.get("alt"))
        if status:
            return status

    main_cell = find_main_cell(row)
    if main_cell is not None:
        status = classify(main_cell.get_text(" ", strip=True))
        if status:
            return status

    return DEFAULT_AVAILABILITY
