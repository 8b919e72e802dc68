"""Hilfsfunktionen (Logging) für den OPAC-Client."""
