#!/usr/bin/env python3
"""
Unit Tests für den Verfügbarkeits-Klassifikator

Installation:
    pip install pytest pytest-cov pytest-mock

Ausführen:
    pytest tests/test_availability.py -v
"""

import pytest

from opac.availability import (
    CLASSIFICATION_RULES,
    DEFAULT_AVAILABILITY,
    AvailabilityStatus,
    classify,
    classify_or_default,
)


# ============================================================================
# tests/test_availability.py
# ============================================================================


class TestClassify:
    """Tests für opac/availability.py: classify()"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("ausleihbar", AvailabilityStatus.AVAILABLE_AT_LIBRARY),
            ("Ausleihbar (in der gewählten Bibliothek)", AvailabilityStatus.AVAILABLE_AT_LIBRARY),
            ("Ausgeliehen bis 15.12.2024", AvailabilityStatus.CHECKED_OUT),
            ("entliehen", AvailabilityStatus.CHECKED_OUT),
            ("Präsenzbestand", AvailabilityStatus.AVAILABLE_REFERENCE_ONLY),
            ("Vorgemerkt", AvailabilityStatus.RESERVED),
            ("bestellt", AvailabilityStatus.ON_ORDER),
            ("vormerkbar", AvailabilityStatus.RESERVABLE),
            ("Bestellbar", AvailabilityStatus.ORDERABLE),
            ("anfragbar", AvailabilityStatus.REQUESTABLE),
            ("vermisst", AvailabilityStatus.MISSING),
            ("Beschädigt", AvailabilityStatus.DAMAGED),
            ("In der Einbandstelle", AvailabilityStatus.BINDING),
            ("Magazin", AvailabilityStatus.MAGAZIN),
            ("heute zurück", AvailabilityStatus.DUE_TODAY_RETURNS),
        ],
    )
    def test_known_phrases(self, text, expected):
        """Test dass bekannte Statustexte korrekt zugeordnet werden"""
        assert classify(text) is expected

    def test_negated_phrases_win_over_positive_substrings(self):
        """Test dass "nicht verfügbar" nicht als verfügbar erkannt wird"""
        assert classify("nicht verfügbar") is AvailabilityStatus.NOT_AVAILABLE
        assert classify("Nicht ausleihbar") is AvailabilityStatus.NOT_LENDABLE

    def test_processing_requires_both_words(self):
        """Test verfügbar + Bearbeitung ergibt AVAILABLE_PROCESSING"""
        assert classify("verfügbar (in Bearbeitung)") is AvailabilityStatus.AVAILABLE_PROCESSING
        assert classify("verfügbar") is AvailabilityStatus.AVAILABLE_AT_LIBRARY

    def test_exact_wire_values(self):
        """Test dass jeder Wire-Wert auf seinen eigenen Status abgebildet wird"""
        for status in AvailabilityStatus:
            assert classify(status.value) is status
            assert classify(status.value.upper()) is status

    def test_empty_and_unknown(self):
        """Test dass leere oder unbekannte Texte None ergeben"""
        assert classify("") is None
        assert classify("   ") is None
        assert classify(None) is None
        assert classify("Der Titel des Buches") is None

    def test_first_rule_wins(self):
        """Test der Regelreihenfolge bei mehreren passenden Begriffen"""
        # "ausleihbar" steht vor "entliehen"
        assert classify("ausleihbar, 2 Exemplare entliehen") is AvailabilityStatus.AVAILABLE_AT_LIBRARY
        # "bestellbar" steht vor "vorgemerkt"
        assert classify("vorgemerkt, bestellbar") is AvailabilityStatus.ORDERABLE

    def test_rule_table_order(self):
        """Test dass die Regeltabelle mit den verneinten Phrasen beginnt"""
        statuses = [status for _, status in CLASSIFICATION_RULES]
        assert statuses[0] is AvailabilityStatus.NOT_AVAILABLE
        assert statuses[1] is AvailabilityStatus.NOT_LENDABLE
        assert statuses[-1] is AvailabilityStatus.MAGAZIN
        assert len(statuses) == 17

    def test_parse_alias(self):
        """Test AvailabilityStatus.parse()"""
        assert AvailabilityStatus.parse("entliehen") is AvailabilityStatus.CHECKED_OUT
        assert AvailabilityStatus.parse("xyz") is None

    def test_classify_or_default(self):
        """Test optimistischer Default"""
        assert classify_or_default("xyz") is DEFAULT_AVAILABILITY
        assert DEFAULT_AVAILABILITY is AvailabilityStatus.AVAILABLE_AT_LIBRARY
        assert classify_or_default("entliehen") is AvailabilityStatus.CHECKED_OUT


class TestAvailabilityStatusProperties:
    """Tests für die abgeleiteten Eigenschaften von AvailabilityStatus"""

    def test_immediately_available(self):
        """Test is_immediately_available"""
        assert AvailabilityStatus.AVAILABLE_AT_LIBRARY.is_immediately_available
        assert AvailabilityStatus.AVAILABLE_PROCESSING.is_immediately_available
        assert AvailabilityStatus.DUE_TODAY_RETURNS.is_immediately_available
        assert not AvailabilityStatus.CHECKED_OUT.is_immediately_available
        assert not AvailabilityStatus.AVAILABLE_REFERENCE_ONLY.is_immediately_available

    def test_accessible(self):
        """Test is_accessible"""
        assert AvailabilityStatus.MAGAZIN.is_accessible
        assert AvailabilityStatus.ORDERABLE.is_accessible
        assert AvailabilityStatus.AVAILABLE_REFERENCE_ONLY.is_accessible
        assert not AvailabilityStatus.CHECKED_OUT.is_accessible
        assert not AvailabilityStatus.MISSING.is_accessible

    def test_can_be_requested(self):
        """Test can_be_requested"""
        assert AvailabilityStatus.CHECKED_OUT.can_be_requested
        assert AvailabilityStatus.RESERVABLE.can_be_requested
        assert AvailabilityStatus.ON_ORDER.can_be_requested
        assert not AvailabilityStatus.AVAILABLE_AT_LIBRARY.can_be_requested
        assert not AvailabilityStatus.DAMAGED.can_be_requested

    def test_status_color(self):
        """Test Ampelfarben"""
        assert AvailabilityStatus.AVAILABLE_AT_LIBRARY.status_color == "green"
        assert AvailabilityStatus.CHECKED_OUT.status_color == "orange"
        assert AvailabilityStatus.MAGAZIN.status_color == "yellow"
        assert AvailabilityStatus.MISSING.status_color == "red"

    def test_descriptions(self):
        """Test dass jeder Status Beschreibungen hat"""
        for status in AvailabilityStatus:
            assert status.localized_description
            assert status.short_description
            assert str(status) == status.localized_description


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
