#!/usr/bin/env python3
"""
Unit Tests für Suchanfragen

Installation:
    pip install pytest pytest-cov pytest-mock

Ausführen:
    pytest tests/test_query.py -v
"""

import pytest

from opac.errors import UnsupportedSearchCategoryError
from opac.query import SearchCategory, SearchOperator, SearchQuery, SearchTerm, SortOrder


# ============================================================================
# tests/test_query.py
# ============================================================================


class TestSearchCategory:
    """Tests für SearchCategory"""

    def test_field_codes(self):
        """Test der numerischen SISIS-Codes"""
        assert SearchCategory.ALL.value == -1
        assert SearchCategory.AUTHOR.value == 100
        assert SearchCategory.TITLE.value == 331
        assert SearchCategory.SUBJECT.value == 650
        assert SearchCategory.ISBN.value == 20
        assert SearchCategory.YEAR.value == 425

    def test_names(self):
        """Test Anzeigenamen und Feldkürzel"""
        assert SearchCategory.AUTHOR.display_name == "Verfasser"
        assert SearchCategory.TITLE.field_name == "TI"
        assert str(SearchCategory.ALL) == "Alle Felder"

    def test_from_name(self):
        """Test Auflösung über Namen und Kürzel"""
        assert SearchCategory.from_name("title") is SearchCategory.TITLE
        assert SearchCategory.from_name("AU") is SearchCategory.AUTHOR
        assert SearchCategory.from_name(" isbn ") is SearchCategory.ISBN

    def test_from_name_unknown(self):
        """Test unbekannte Kategorie"""
        with pytest.raises(UnsupportedSearchCategoryError):
            SearchCategory.from_name("signatur")


class TestSearchQuery:
    """Tests für SearchQuery"""

    def test_simple(self):
        """Test einfache Suche"""
        query = SearchQuery.simple("Harry Potter")

        assert query.is_simple_query
        assert query.is_valid
        assert query.primary_query == "Harry Potter"
        assert str(query) == '"Harry Potter"'

    def test_validity(self):
        """Test dass leere Suchbegriffe ungültig sind"""
        assert not SearchQuery().is_valid
        assert not SearchQuery([SearchTerm("  ")]).is_valid
        assert SearchQuery().primary_query == ""

    def test_string_representation(self):
        """Test Textdarstellung mit Feldkürzeln"""
        query = SearchQuery(
            [SearchTerm("Faust", SearchCategory.TITLE), SearchTerm("Goethe", SearchCategory.AUTHOR, SearchOperator.OR)]
        )
        assert str(query) == 'TI:"Faust" AND AU:"Goethe"'
        assert not query.is_simple_query

    def test_to_params_header(self):
        """Test der festen Formularparameter"""
        query = SearchQuery.simple("Faust", branch=2)
        params = query.to_params("SESSION1")

        assert params[:9] == [
            ("methodToCall", "submit"),
            ("methodToCallParameter", "submitSearch"),
            ("submitSearch", "Suchen"),
            ("callingPage", "searchPreferences"),
            ("numberOfHits", "50"),
            ("timeOut", "20"),
            ("CSId", "SESSION1"),
            ("selectedViewBranchlib", "2"),
            ("selectedSearchBranchlib", "2"),
        ]

    def test_to_params_terms(self):
        """Test der Parameter pro Suchbegriff"""
        query = SearchQuery(
            [
                SearchTerm("Faust", SearchCategory.TITLE, SearchOperator.NOT),
                SearchTerm("Goethe", SearchCategory.AUTHOR, SearchOperator.OR),
            ],
            results_per_page=20,
        )
        params = dict(query.to_params("S"))

        assert params["numberOfHits"] == "20"
        assert params["searchCategories[0]"] == "331"
        assert params["searchString[0]"] == "Faust"
        assert params["combinationOperator[0]"] == "AND"
        assert params["searchCategories[1]"] == "100"
        assert params["searchString[1]"] == "Goethe"
        assert params["combinationOperator[1]"] == "OR"
        assert params["searchRestrictionID[1]"] == ""
        assert params["searchRestrictionValue1[1]"] == ""

    def test_display_names(self):
        """Test Anzeigenamen von Operator und Sortierung"""
        assert SearchOperator.NOT.display_name == "NICHT"
        assert str(SearchOperator.AND) == "UND"
        assert SortOrder.YEAR_DESC.display_name == "Jahr (absteigend)"
        assert str(SortOrder.RELEVANCE) == "Relevanz"


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
