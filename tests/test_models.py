#!/usr/bin/env python3
"""
Unit Tests für die Datenmodelle

Installation:
    pip install pytest pytest-cov pytest-mock

Ausführen:
    pytest tests/test_models.py -v
"""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from opac.availability import AvailabilityStatus
from opac.models import DetailedMediaRecord, ItemAvailability, MediaRecord


# ============================================================================
# tests/test_models.py
# ============================================================================


class TestMediaRecord:
    """Tests für MediaRecord"""

    def test_defaults(self):
        """Test Standardwerte"""
        record = MediaRecord(title="Der Zauberberg")

        assert record.author == ""
        assert record.year == ""
        assert record.availability is AvailabilityStatus.AVAILABLE_AT_LIBRARY
        assert record.is_available
        assert record.is_valid

    def test_marker_and_whitespace_cleanup(self):
        """Test dass Titel getrimmt und der Marker entfernt wird"""
        record = MediaRecord(title="  ¬Der Titel  ", author=" Mann, Thomas ")
        assert record.title == "Der Titel"
        assert record.author == "Mann, Thomas"

    def test_empty_title_raises(self):
        """Test dass ein leerer Titel abgelehnt wird"""
        with pytest.raises(ValueError):
            MediaRecord(title="   ")
        with pytest.raises(ValueError):
            MediaRecord(title="¬")

    def test_title_equal_author_raises(self):
        """Test dass Titel == Autor abgelehnt wird"""
        with pytest.raises(ValueError):
            MediaRecord(title="Schmidt, Anna", author="Schmidt, Anna")

    @pytest.mark.parametrize(
        "year, expected",
        [("2023", "2023"), ("1400", "1400"), ("2030", "2030"), ("1399", ""), ("2031", ""), ("123", ""), ("abcd", "")],
    )
    def test_year_validation(self, year, expected):
        """Test dass Jahre außerhalb [1400, 2030] verworfen werden"""
        assert MediaRecord(title="Titel", year=year).year == expected

    def test_immutable(self):
        """Test dass Datensätze unveränderlich sind"""
        record = MediaRecord(title="Titel")
        with pytest.raises(FrozenInstanceError):
            record.title = "Anders"

    def test_is_valid(self):
        """Test dass einbuchstabige Titel nicht gültig sind"""
        assert not MediaRecord(title="X").is_valid

    def test_to_dict(self):
        """Test Dictionary-Darstellung"""
        record = MediaRecord(title="Titel", author="Autor, A.", year="2001", media_type="Buch", id="42")
        assert record.to_dict() == {
            "title": "Titel",
            "author": "Autor, A.",
            "year": "2001",
            "media_type": "Buch",
            "id": "42",
            "availability": "ausleihbar",
        }


class TestItemAvailability:
    """Tests für ItemAvailability"""

    def test_negative_reservations_raise(self):
        """Test dass negative Vormerkungen abgelehnt werden"""
        with pytest.raises(ValueError):
            ItemAvailability(status=AvailabilityStatus.RESERVED, reservation_count=-1)

    def test_availability_description_with_due_date(self):
        """Test Beschreibung mit Rückgabedatum"""
        item = ItemAvailability(status=AvailabilityStatus.CHECKED_OUT, due_date=date(2024, 12, 15))
        assert item.availability_description == "Ausgeliehen (bis 15.12.24)"

    def test_full_description(self):
        """Test vollständige Beschreibung"""
        item = ItemAvailability(
            status=AvailabilityStatus.CHECKED_OUT,
            location="2. OG",
            call_number="ABC 123",
            reservation_count=1,
            branch="Zentralbibliothek",
        )
        assert item.full_description == "Zentralbibliothek - 2. OG - ABC 123 - Ausgeliehen - (1 Vormerkung)"
        assert str(item) == item.full_description

    def test_full_description_plural(self):
        """Test Plural der Vormerkungen"""
        item = ItemAvailability(status=AvailabilityStatus.RESERVED, reservation_count=3)
        assert item.full_description.endswith("(3 Vormerkungen)")


class TestDetailedMediaRecord:
    """Tests für DetailedMediaRecord"""

    @pytest.fixture
    def basic_info(self):
        return MediaRecord(title="Faust", author="Goethe, Johann Wolfgang von", year="1986", id="faust-1")

    def test_no_copies(self, basic_info):
        """Test ohne Exemplare"""
        record = DetailedMediaRecord(basic_info=basic_info)

        assert record.id == "faust-1"
        assert record.total_copies == 0
        assert not record.has_available_copies
        assert record.availability_summary == "Keine Exemplare vorhanden"

    def test_all_checked_out(self, basic_info):
        """Test wenn alle Exemplare ausgeliehen sind"""
        items = [
            ItemAvailability(status=AvailabilityStatus.CHECKED_OUT, location="A", reservation_count=2),
            ItemAvailability(status=AvailabilityStatus.RESERVED, location="B", reservation_count=1),
        ]
        record = DetailedMediaRecord(basic_info=basic_info, availability=items)

        assert record.available_copies == 0
        assert record.total_reservations == 3
        assert record.availability_summary == "Alle 2 Exemplare ausgeliehen"

    def test_partially_available(self, basic_info):
        """Test teilweise verfügbarer Bestand"""
        items = [
            ItemAvailability(status=AvailabilityStatus.AVAILABLE_AT_LIBRARY, location="Zentralbibliothek"),
            ItemAvailability(status=AvailabilityStatus.CHECKED_OUT, location="Neustadt"),
        ]
        record = DetailedMediaRecord(basic_info=basic_info, availability=items)

        assert record.has_available_copies
        assert record.availability_summary == "1 von 2 verfügbar"
        assert record.detailed_description == (
            "Faust von Goethe, Johann Wolfgang von (1986)\n"
            "1 von 2 verfügbar\n"
            "Standorte: Zentralbibliothek, Neustadt"
        )


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
