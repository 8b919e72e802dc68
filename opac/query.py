#!/usr/bin/env python3
"""
Suchanfragen für den SISIS-OPAC

Eine SearchQuery besteht aus einem oder mehreren Suchbegriffen (SearchTerm),
die jeweils auf eine Suchkategorie (Titel, Verfasser, ...) beschränkt und
über Operatoren verknüpft werden. to_params() erzeugt daraus die
Parameterliste für search.do.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from opac.errors import UnsupportedSearchCategoryError


class SearchCategory(Enum):
    """Suchkategorien mit den numerischen SISIS-Feldcodes."""

    ALL = -1
    AUTHOR = 100
    PUBLISHER = 412
    TITLE = 331
    SUBJECT = 650
    ISBN = 20
    YEAR = 425
    KEYWORDS = 300
    SERIES = 490

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]

    @property
    def field_name(self) -> str:
        """Kurzes Feldkürzel für die Textdarstellung (z.B. "TI")."""
        return _CATEGORY_FIELD_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "SearchCategory":
        """
        Sucht eine Kategorie über ihren Namen ("title", "AUTHOR", "TI", ...).

        Raises:
            UnsupportedSearchCategoryError: Wenn der Name unbekannt ist
        """
        key = (name or "").strip().upper()
        for category in cls:
            if key in (category.name, category.field_name):
                return category
        raise UnsupportedSearchCategoryError(f"Unbekannte Suchkategorie: '{name}'")

    def __str__(self) -> str:
        return self.display_name


_CATEGORY_DISPLAY_NAMES = {
    SearchCategory.ALL: "Alle Felder",
    SearchCategory.TITLE: "Titel",
    SearchCategory.AUTHOR: "Verfasser",
    SearchCategory.SUBJECT: "Schlagwort",
    SearchCategory.ISBN: "ISBN",
    SearchCategory.PUBLISHER: "Verlag",
    SearchCategory.YEAR: "Erscheinungsjahr",
    SearchCategory.KEYWORDS: "Stichwörter",
    SearchCategory.SERIES: "Reihe",
}

_CATEGORY_FIELD_NAMES = {
    SearchCategory.ALL: "ALL",
    SearchCategory.TITLE: "TI",
    SearchCategory.AUTHOR: "AU",
    SearchCategory.SUBJECT: "SU",
    SearchCategory.ISBN: "ISBN",
    SearchCategory.PUBLISHER: "PU",
    SearchCategory.YEAR: "YR",
    SearchCategory.KEYWORDS: "KW",
    SearchCategory.SERIES: "SE",
}


class SearchOperator(Enum):
    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @property
    def display_name(self) -> str:
        return {"AND": "UND", "OR": "ODER", "NOT": "NICHT"}[self.value]

    def __str__(self) -> str:
        return self.display_name


class SortOrder(Enum):
    RELEVANCE = "RELEVANCE"
    TITLE_ASC = "TITLE_ASC"
    TITLE_DESC = "TITLE_DESC"
    AUTHOR_ASC = "AUTHOR_ASC"
    AUTHOR_DESC = "AUTHOR_DESC"
    YEAR_ASC = "YEAR_ASC"
    YEAR_DESC = "YEAR_DESC"

    @property
    def display_name(self) -> str:
        return _SORT_DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name


_SORT_DISPLAY_NAMES = {
    SortOrder.RELEVANCE: "Relevanz",
    SortOrder.TITLE_ASC: "Titel (A-Z)",
    SortOrder.TITLE_DESC: "Titel (Z-A)",
    SortOrder.AUTHOR_ASC: "Autor (A-Z)",
    SortOrder.AUTHOR_DESC: "Autor (Z-A)",
    SortOrder.YEAR_ASC: "Jahr (aufsteigend)",
    SortOrder.YEAR_DESC: "Jahr (absteigend)",
}


@dataclass(frozen=True)
class SearchTerm:
    """Ein Suchbegriff, beschränkt auf eine Kategorie."""

    query: str
    category: SearchCategory = SearchCategory.ALL
    operator: SearchOperator = SearchOperator.AND

    def __str__(self) -> str:
        if self.category is SearchCategory.ALL:
            return f'"{self.query}"'
        return f'{self.category.field_name}:"{self.query}"'


@dataclass(frozen=True)
class SearchQuery:
    """
    Vollständige Suchanfrage.

    Attributes:
        terms: Suchbegriffe in Reihenfolge
        branch: Index der Zweigstelle (0 = alle bzw. Zentralbibliothek)
        sort_order: Sortierung der Treffer
        results_per_page: Anzahl Treffer pro Seite

    Example:
        >>> query = SearchQuery([SearchTerm("Faust", SearchCategory.TITLE),
        ...                      SearchTerm("Goethe", SearchCategory.AUTHOR)])
        >>> str(query)
        'TI:"Faust" AND AU:"Goethe"'
    """

    terms: List[SearchTerm] = field(default_factory=list)
    branch: int = 0
    sort_order: SortOrder = SortOrder.RELEVANCE
    results_per_page: int = 50

    @classmethod
    def simple(cls, text: str, branch: int = 0, sort_order: SortOrder = SortOrder.RELEVANCE) -> "SearchQuery":
        """Einfache Suche über alle Felder."""
        return cls(terms=[SearchTerm(text)], branch=branch, sort_order=sort_order)

    @property
    def is_simple_query(self) -> bool:
        return len(self.terms) == 1 and self.terms[0].category is SearchCategory.ALL

    @property
    def primary_query(self) -> str:
        return self.terms[0].query if self.terms else ""

    @property
    def is_valid(self) -> bool:
        """Mindestens ein Suchbegriff mit Inhalt."""
        return any(term.query.strip() for term in self.terms)

    def to_params(self, session_id: str) -> List[Tuple[str, str]]:
        """
        Erzeugt die Request-Parameter für search.do.

        Die Reihenfolge der Parameter entspricht dem Suchformular des OPAC.
        Der Operator des ersten Begriffs ist immer AND.

        Args:
            session_id: Session-ID (CSId) aus der Startseite

        Returns:
            Liste von (Name, Wert)-Paaren, geeignet für requests' params
        """
        branch = str(self.branch)
        params: List[Tuple[str, str]] = [
            ("methodToCall", "submit"),
            ("methodToCallParameter", "submitSearch"),
            ("submitSearch", "Suchen"),
            ("callingPage", "searchPreferences"),
            ("numberOfHits", str(self.results_per_page)),
            ("timeOut", "20"),
            ("CSId", session_id),
            ("selectedViewBranchlib", branch),
            ("selectedSearchBranchlib", branch),
        ]

        for index, term in enumerate(self.terms):
            operator = SearchOperator.AND if index == 0 else term.operator
            params.extend(
                [
                    (f"searchCategories[{index}]", str(term.category.value)),
                    (f"searchString[{index}]", term.query),
                    (f"searchRestrictionID[{index}]", ""),
                    (f"searchRestrictionValue1[{index}]", ""),
                    (f"combinationOperator[{index}]", operator.value),
                ]
            )

        return params

    def __str__(self) -> str:
        return f" {SearchOperator.AND.value} ".join(str(term) for term in self.terms)
