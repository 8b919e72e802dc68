#!/usr/bin/env python3
"""
Versionsinformationen für den SISIS-OPAC-Client
"""

__version__ = "1.0.0"
__author__ = "dgaida"
__license__ = "MIT"
__description__ = "Client für die Katalogsuche in SISIS-WebOPAC-Bibliotheken"

# Release-Informationen
RELEASE_DATE = "2026-10-19"
RELEASE_NAME = "Erste Version"

# Feature-Flags
FEATURES = {
    "simple_search": True,
    "advanced_search": True,
    "detail_view": True,
    "item_availability": True,
    "library_config": True,
}


def get_version_info():
    """Gibt vollständige Versionsinformationen zurück"""
    return {
        "version": __version__,
        "release_date": RELEASE_DATE,
        "release_name": RELEASE_NAME,
        "author": __author__,
        "license": __license__,
        "description": __description__,
        "features": FEATURES,
    }


def print_version_info():
    """Druckt Versionsinformationen auf der Konsole"""
    print(f"\n{'=' * 60}")
    print("  📚 SISIS-OPAC-Client")
    print(f"{'=' * 60}")
    print(f"  Version:      {__version__}")
    print(f"  Release:      {RELEASE_NAME}")
    print(f"  Datum:        {RELEASE_DATE}")
    print(f"  Autor:        {__author__}")
    print(f"  Lizenz:       {__license__}")
    print(f"{'=' * 60}\n")


if __name__ == "__main__":
    print_version_info()
