#!/usr/bin/env python3
"""
Datenmodelle des OPAC-Clients

Alle Modelle sind unveränderliche Wertobjekte, die einmal pro Parse-Aufruf
erzeugt werden.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from opac.availability import DEFAULT_AVAILABILITY, AvailabilityStatus

MARKER_CHAR: str = "¬"

MIN_RECORD_YEAR: int = 1400
MAX_RECORD_YEAR: int = 2030


def _validated_year(year: str) -> str:
    """Gibt das Jahr zurück, wenn es im zulässigen Bereich liegt, sonst ""."""
    clean = (year or "").strip()
    if len(clean) == 4 and clean.isdigit() and MIN_RECORD_YEAR <= int(clean) <= MAX_RECORD_YEAR:
        return clean
    return ""


@dataclass(frozen=True)
class MediaRecord:
    """
    Ein Treffer aus der Katalogsuche.

    Attributes:
        title: Titel (nicht leer, führendes "¬" entfernt)
        author: Verfasser, kann leer sein
        year: Erscheinungsjahr als 4-stelliger String oder ""
        media_type: Medientyp, meist aus dem alt-Text des Icons
        id: Katalog-ID oder relativer Pfad zur Detailseite
        availability: Verfügbarkeitszustand
    """

    title: str
    author: str = ""
    year: str = ""
    media_type: str = ""
    id: str = ""
    availability: AvailabilityStatus = DEFAULT_AVAILABILITY

    def __post_init__(self) -> None:
        title = (self.title or "").strip()
        if title.startswith(MARKER_CHAR):
            title = title[1:].strip()
        author = (self.author or "").strip()

        if not title:
            raise ValueError("MediaRecord benötigt einen nicht-leeren Titel")
        if author and title == author:
            raise ValueError(f"Titel und Autor sind identisch: '{title}'")

        object.__setattr__(self, "title", title)
        object.__setattr__(self, "author", author)
        object.__setattr__(self, "year", _validated_year(self.year))
        object.__setattr__(self, "media_type", (self.media_type or "").strip())
        object.__setattr__(self, "id", (self.id or "").strip())

    @property
    def is_valid(self) -> bool:
        return len(self.title) > 1

    @property
    def is_available(self) -> bool:
        return self.availability.is_immediately_available

    def to_dict(self) -> Dict[str, Any]:
        """Datensatz als einfaches Dictionary (z.B. für Anzeige oder JSON)."""
        return {
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "media_type": self.media_type,
            "id": self.id,
            "availability": self.availability.value,
        }


@dataclass(frozen=True)
class ItemAvailability:
    """
    Verfügbarkeit eines einzelnen Exemplars.

    Attributes:
        status: Verfügbarkeitszustand
        location: Standort (z.B. "Zentralbibliothek, 2. OG")
        call_number: Signatur
        due_date: Rückgabedatum, falls ausgeliehen
        reservation_count: Anzahl der Vormerkungen
        status_note: Zusätzlicher Statustext des Katalogs
        branch: Zweigstelle
    """

    status: AvailabilityStatus
    location: str = ""
    call_number: str = ""
    due_date: Optional[date] = None
    reservation_count: int = 0
    status_note: Optional[str] = None
    branch: Optional[str] = None

    def __post_init__(self) -> None:
        if self.reservation_count < 0:
            raise ValueError(f"Negative Anzahl Vormerkungen: {self.reservation_count}")

    @property
    def is_available(self) -> bool:
        return self.status.is_immediately_available

    @property
    def availability_description(self) -> str:
        description = self.status.localized_description
        if self.due_date:
            description += f" (bis {self.due_date.strftime('%d.%m.%y')})"
        return description

    @property
    def full_description(self) -> str:
        components: List[str] = []
        if self.branch:
            components.append(self.branch)
        if self.location:
            components.append(self.location)
        if self.call_number:
            components.append(self.call_number)
        components.append(self.availability_description)
        if self.reservation_count > 0:
            suffix = "" if self.reservation_count == 1 else "en"
            components.append(f"({self.reservation_count} Vormerkung{suffix})")
        return " - ".join(components)

    def __str__(self) -> str:
        return self.full_description


@dataclass(frozen=True)
class DetailedMediaRecord:
    """Detailansicht eines Mediums mit Exemplar-Verfügbarkeiten."""

    basic_info: MediaRecord
    description: Optional[str] = None
    table_of_contents: List[str] = field(default_factory=list)
    subjects: List[str] = field(default_factory=list)
    availability: List[ItemAvailability] = field(default_factory=list)
    additional_info: Dict[str, str] = field(default_factory=dict)
    cover_image_urls: List[str] = field(default_factory=list)
    edition: Optional[str] = None
    physical_description: Optional[str] = None
    language: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.basic_info.id

    @property
    def total_copies(self) -> int:
        return len(self.availability)

    @property
    def available_copies(self) -> int:
        return sum(1 for item in self.availability if item.is_available)

    @property
    def has_available_copies(self) -> bool:
        return self.available_copies > 0

    @property
    def total_reservations(self) -> int:
        return sum(item.reservation_count for item in self.availability)

    @property
    def availability_summary(self) -> str:
        if not self.availability:
            return "Keine Exemplare vorhanden"
        if self.has_available_copies:
            return f"{self.available_copies} von {self.total_copies} verfügbar"
        return f"Alle {self.total_copies} Exemplare ausgeliehen"

    @property
    def detailed_description(self) -> str:
        info = self.basic_info
        locations = ", ".join(item.location for item in self.availability)
        return f"{info.title} von {info.author} ({info.year})\n" f"{self.availability_summary}\n" f"Standorte: {locations}"


@dataclass(frozen=True)
class SessionData:
    """Session-ID des OPAC und die zugehörigen Cookies."""

    session_id: str
    cookies: Any = None
