#!/usr/bin/env python3
"""
Unit Tests für Kommandozeile, Logging-Konfiguration und Versionsinfo

Installation:
    pip install pytest pytest-cov pytest-mock

Ausführen:
    pytest tests/test_main.py -v
"""

import logging
from unittest.mock import patch

import pytest

from opac.config import default_library_config
from opac.errors import SessionError
from opac.models import MediaRecord
from opac.query import SearchCategory


# ============================================================================
# tests/test_main.py
# ============================================================================


class TestMain:
    """Tests für main.py"""

    @pytest.fixture
    def mock_service(self):
        with patch("main.setup_logging"), patch(
            "main.config_from_env", return_value=default_library_config()
        ), patch("main.OPACService") as service_cls:
            yield service_cls.return_value

    def test_search_and_details(self, mock_service):
        """Test Suche mit Detailansicht für den ersten Treffer"""
        from main import main

        mock_service.search.return_value = [MediaRecord(title="Faust", id="singleHit.do?curPos=1")]

        assert main(["Faust", "--category", "title", "--details", "1"]) == 0

        mock_service.search.assert_called_once_with("Faust", SearchCategory.TITLE)
        mock_service.display_results.assert_called_once()
        mock_service.get_detailed_info.assert_called_once_with("singleHit.do?curPos=1")

    def test_default_category(self, mock_service):
        """Test Standardkategorie ohne Details"""
        from main import main

        mock_service.search.return_value = []

        assert main(["Zauberberg"]) == 0
        mock_service.search.assert_called_once_with("Zauberberg", SearchCategory.ALL)
        mock_service.get_detailed_info.assert_not_called()

    def test_opac_error_exit_code(self, mock_service, capsys):
        """Test Exit-Code 1 bei OPACError"""
        from main import main

        mock_service.search.side_effect = SessionError()

        assert main(["Faust"]) == 1
        assert "Fehler" in capsys.readouterr().out

    def test_unknown_category(self):
        """Test dass argparse unbekannte Kategorien ablehnt"""
        from main import main

        with pytest.raises(SystemExit):
            main(["Faust", "--category", "signatur"])


class TestLoggingConfig:
    """Tests für utils/logging_config.py"""

    def test_setup_logging(self, tmp_path, monkeypatch):
        """Test Konsolen- und Datei-Handler"""
        from utils import logging_config

        monkeypatch.setattr(logging_config, "_configured", False)
        root = logging.getLogger()
        handlers_before = list(root.handlers)
        level_before = root.level
        log_file = tmp_path / "logs" / "test.log"

        try:
            logging_config.setup_logging(level="DEBUG", log_file=str(log_file))
            logging_config.get_logger("opac.test").debug("Testnachricht")

            assert root.level == logging.DEBUG
            assert log_file.exists()
            assert len(root.handlers) == len(handlers_before) + 2
        finally:
            for handler in root.handlers[len(handlers_before):]:
                handler.close()
                root.removeHandler(handler)
            root.setLevel(level_before)

    def test_get_logger(self):
        """Test dass get_logger den Modul-Logger liefert"""
        from utils.logging_config import get_logger

        assert get_logger("opac.parsers").name == "opac.parsers"


class TestVersion:
    """Tests für version.py"""

    def test_version_info(self):
        """Test Versionsinformationen"""
        from version import __version__, get_version_info

        info = get_version_info()
        assert info["version"] == __version__
        assert info["features"]["detail_view"]


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
