#!/usr/bin/env python3
"""
Verfügbarkeitsstatus im SISIS-OPAC

Enthält die geschlossene Menge der Verfügbarkeitszustände und den
Klassifikator, der freie Statustexte ("Ausgeliehen bis 15.12.2024",
"ausleihbar (in der gewählten Bibliothek)", ...) auf einen Zustand abbildet.

Die Regeltabelle wird von oben nach unten ausgewertet, der erste Treffer
gewinnt. Verneinte Phrasen ("nicht verfügbar", "nicht ausleihbar") stehen
vor ihren positiven Teilstrings.
"""

from enum import Enum
from typing import Callable, Optional, Tuple

from utils.logging_config import get_logger

logger = get_logger(__name__)


class AvailabilityStatus(Enum):
    """Verfügbarkeitszustand eines Mediums bzw. Exemplars."""

    # Verfügbar
    AVAILABLE_AT_LIBRARY = "ausleihbar"
    AVAILABLE_REFERENCE_ONLY = "präsenzbestand"
    AVAILABLE_PROCESSING = "verfügbar_bearbeitung"

    # Nicht verfügbar (temporär)
    CHECKED_OUT = "entliehen"
    DUE_TODAY_RETURNS = "heute_zurück"
    RESERVED = "vorgemerkt"
    ON_ORDER = "bestellt"

    # Anforderbar
    RESERVABLE = "vormerkbar"
    ORDERABLE = "bestellbar"
    REQUESTABLE = "anfragbar"

    # Eingeschränkt
    NOT_AVAILABLE = "nicht_verfügbar"
    NOT_LENDABLE = "nicht_ausleihbar"
    MISSING = "vermisst"
    DAMAGED = "beschädigt"
    BINDING = "einband"
    MAGAZIN = "magazin"

    @property
    def is_accessible(self) -> bool:
        """True, wenn der Nutzer das Medium auf irgendeinem Weg erhalten kann."""
        return self in _ACCESSIBLE

    @property
    def is_immediately_available(self) -> bool:
        """True, wenn das Medium ohne Wartezeit ausleihbar ist."""
        return self in _IMMEDIATELY_AVAILABLE

    @property
    def can_be_requested(self) -> bool:
        """True, wenn eine Vormerkung/Bestellung sinnvoll ist."""
        return self in _REQUESTABLE

    @property
    def localized_description(self) -> str:
        return _LOCALIZED_DESCRIPTIONS[self]

    @property
    def short_description(self) -> str:
        return _SHORT_DESCRIPTIONS[self]

    @property
    def status_color(self) -> str:
        """Ampelfarbe für die Anzeige (green, yellow, orange, red)."""
        if self.is_immediately_available:
            return "green"
        if self in (AvailabilityStatus.CHECKED_OUT, AvailabilityStatus.RESERVED, AvailabilityStatus.ON_ORDER):
            return "orange"
        if self.is_accessible:
            return "yellow"
        return "red"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["AvailabilityStatus"]:
        """Alias für classify()."""
        return classify(text)

    def __str__(self) -> str:
        return self.localized_description


_ACCESSIBLE = frozenset(
    {
        AvailabilityStatus.AVAILABLE_AT_LIBRARY,
        AvailabilityStatus.AVAILABLE_REFERENCE_ONLY,
        AvailabilityStatus.AVAILABLE_PROCESSING,
        AvailabilityStatus.DUE_TODAY_RETURNS,
        AvailabilityStatus.RESERVABLE,
        AvailabilityStatus.ORDERABLE,
        AvailabilityStatus.REQUESTABLE,
        AvailabilityStatus.MAGAZIN,
    }
)

_IMMEDIATELY_AVAILABLE = frozenset(
    {
        AvailabilityStatus.AVAILABLE_AT_LIBRARY,
        AvailabilityStatus.AVAILABLE_PROCESSING,
        AvailabilityStatus.DUE_TODAY_RETURNS,
    }
)

_REQUESTABLE = frozenset(
    {
        AvailabilityStatus.RESERVABLE,
        AvailabilityStatus.ORDERABLE,
        AvailabilityStatus.REQUESTABLE,
        AvailabilityStatus.CHECKED_OUT,
        AvailabilityStatus.RESERVED,
        AvailabilityStatus.ON_ORDER,
    }
)

_LOCALIZED_DESCRIPTIONS = {
    AvailabilityStatus.AVAILABLE_AT_LIBRARY: "Ausleihbar (in der gewählten Bibliothek)",
    AvailabilityStatus.AVAILABLE_REFERENCE_ONLY: "Präsenzbestand (nur zur Einsichtnahme)",
    AvailabilityStatus.AVAILABLE_PROCESSING: "Verfügbar (in Bearbeitung)",
    AvailabilityStatus.CHECKED_OUT: "Ausgeliehen",
    AvailabilityStatus.DUE_TODAY_RETURNS: "Heute zurück erwartet",
    AvailabilityStatus.RESERVED: "Vorgemerkt",
    AvailabilityStatus.ON_ORDER: "Bestellt",
    AvailabilityStatus.RESERVABLE: "Vormerkbar",
    AvailabilityStatus.ORDERABLE: "Bestellbar (aus anderer Bibliothek)",
    AvailabilityStatus.REQUESTABLE: "Anfragbar",
    AvailabilityStatus.NOT_AVAILABLE: "Nicht verfügbar",
    AvailabilityStatus.NOT_LENDABLE: "Nicht ausleihbar",
    AvailabilityStatus.MISSING: "Vermisst",
    AvailabilityStatus.DAMAGED: "Beschädigt",
    AvailabilityStatus.BINDING: "In der Einbandstelle",
    AvailabilityStatus.MAGAZIN: "Magazinbestand (bestellbar)",
}

_SHORT_DESCRIPTIONS = {
    AvailabilityStatus.AVAILABLE_AT_LIBRARY: "Verfügbar",
    AvailabilityStatus.AVAILABLE_REFERENCE_ONLY: "Präsenz",
    AvailabilityStatus.AVAILABLE_PROCESSING: "Bearbeitung",
    AvailabilityStatus.CHECKED_OUT: "Entliehen",
    AvailabilityStatus.DUE_TODAY_RETURNS: "Heute zurück",
    AvailabilityStatus.RESERVED: "Vorgemerkt",
    AvailabilityStatus.ON_ORDER: "Bestellt",
    AvailabilityStatus.RESERVABLE: "Vormerkbar",
    AvailabilityStatus.ORDERABLE: "Bestellbar",
    AvailabilityStatus.REQUESTABLE: "Anfragbar",
    AvailabilityStatus.NOT_AVAILABLE: "Nicht verfügbar",
    AvailabilityStatus.NOT_LENDABLE: "Nicht ausleihbar",
    AvailabilityStatus.MISSING: "Vermisst",
    AvailabilityStatus.DAMAGED: "Beschädigt",
    AvailabilityStatus.BINDING: "Einband",
    AvailabilityStatus.MAGAZIN: "Magazin",
}


def _contains(*phrases: str) -> Callable[[str], bool]:
    return lambda text: any(phrase in text for phrase in phrases)


def _contains_all(*phrases: str) -> Callable[[str], bool]:
    return lambda text: all(phrase in text for phrase in phrases)


# Reihenfolge ist Teil der Semantik: erster Treffer gewinnt.
CLASSIFICATION_RULES: Tuple[Tuple[Callable[[str], bool], AvailabilityStatus], ...] = (
    (_contains("nicht verfügbar"), AvailabilityStatus.NOT_AVAILABLE),
    (_contains("nicht ausleihbar"), AvailabilityStatus.NOT_LENDABLE),
    (_contains("ausleihbar"), AvailabilityStatus.AVAILABLE_AT_LIBRARY),
    (_contains("bestellbar"), AvailabilityStatus.ORDERABLE),
    (_contains("präsenzbestand", "präsenz"), AvailabilityStatus.AVAILABLE_REFERENCE_ONLY),
    (_contains_all("verfügbar", "bearbeitung"), AvailabilityStatus.AVAILABLE_PROCESSING),
    (_contains("verfügbar"), AvailabilityStatus.AVAILABLE_AT_LIBRARY),
    (_contains("entliehen", "ausgeliehen"), AvailabilityStatus.CHECKED_OUT),
    (_contains("heute zurück", "heute_zurück"), AvailabilityStatus.DUE_TODAY_RETURNS),
    (_contains("vorgemerkt"), AvailabilityStatus.RESERVED),
    (_contains("bestellt"), AvailabilityStatus.ON_ORDER),
    (_contains("vormerkbar"), AvailabilityStatus.RESERVABLE),
    (_contains("anfragbar"), AvailabilityStatus.REQUESTABLE),
    (_contains("vermisst"), AvailabilityStatus.MISSING),
    (_contains("beschädigt"), AvailabilityStatus.DAMAGED),
    (_contains("einband"), AvailabilityStatus.BINDING),
    (_contains("magazin"), AvailabilityStatus.MAGAZIN),
)

DEFAULT_AVAILABILITY: AvailabilityStatus = AvailabilityStatus.AVAILABLE_AT_LIBRARY


def classify(text: Optional[str]) -> Optional[AvailabilityStatus]:
    """
    Bildet einen Statustext auf einen Verfügbarkeitszustand ab.

    Zuerst wird auf exakte Übereinstimmung mit einem Wire-Wert geprüft
    ("ausleihbar", "entliehen", ...), danach die geordnete Regeltabelle
    CLASSIFICATION_RULES.

    Args:
        text: Roher Statustext aus dem Katalog

    Returns:
        Verfügbarkeitszustand oder None, wenn nichts passt

    Example:
        >>> classify("Ausgeliehen bis 15.12.2024")
        <AvailabilityStatus.CHECKED_OUT: 'entliehen'>
        >>> classify("nicht verfügbar") is AvailabilityStatus.NOT_AVAILABLE
        True
    """
    if not text:
        return None

    normalized = text.lower().strip()
    if not normalized:
        return None

    try:
        return AvailabilityStatus(normalized)
    except ValueError:
        pass

    for matches, status in CLASSIFICATION_RULES:
        if matches(normalized):
            return status

    return None


def classify_or_default(text: Optional[str]) -> AvailabilityStatus:
    """Wie classify(), aber mit optimistischem Default (ausleihbar)."""
    status = classify(text)
    if status is None:
        logger.debug(f"Kein Status erkannt in '{(text or '')[:60]}' - verwende Default")
        return DEFAULT_AVAILABILITY
    return status
