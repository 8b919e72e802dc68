#!/usr/bin/env python3
"""
Haupteinstiegspunkt für den SISIS-OPAC-Client

Beispiel:
    library-opac "Harry Potter" --category title --details 1
"""

import sys
import argparse
from typing import List, Optional

from dotenv import load_dotenv

from opac.config import config_from_env, load_library_config
from opac.errors import OPACError
from opac.query import SearchCategory
from opac.search import OPACService
from utils.logging_config import get_logger, setup_logging

# Lade Umgebungsvariablen
load_dotenv()

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="library-opac", description="Suche im SISIS-WebOPAC einer Bibliothek")
    parser.add_argument("term", help="Suchbegriff")
    parser.add_argument(
        "--category",
        default="all",
        choices=[category.name.lower() for category in SearchCategory],
        help="Suchkategorie (default: all)",
    )
    parser.add_argument(
        "--details",
        type=int,
        default=0,
        metavar="N",
        help="Detailansicht für die ersten N Treffer laden",
    )
    parser.add_argument("--config", help="Pfad oder URL einer Bibliothekskonfiguration (JSON)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Ausführliches Logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Hauptfunktion - führt eine Suche aus und zeigt die Treffer an.

    Args:
        argv: Kommandozeilenargumente (default: sys.argv[1:])

    Returns:
        Exit-Code (0 bei Erfolg, 1 bei OPACError)
    """
    args = build_parser().parse_args(argv)
    setup_logging(level="DEBUG" if args.verbose else None)

    try:
        config = load_library_config(args.config) if args.config else config_from_env()
        logger.info(f"Bibliothek: {config.title or config.baseurl}")

        service = OPACService(config)
        records = service.search(args.term, SearchCategory.from_name(args.category))
        service.display_results(records)

        for record in records[: max(args.details, 0)]:
            if record.id:
                service.display_details(service.get_detailed_info(record.id))

    except OPACError as e:
        logger.error(f"❌ Fehler: {e.message}")
        print(f"\n❌ Fehler: {e.message}")
        return 1

    except KeyboardInterrupt:
        logger.info("\n\n⚠️  Suche durch Benutzer beendet (Ctrl+C)")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
