"""Gemeinsame Hilfsfunktionen (Logging, Parsing, Cache, Rate Limiting)"""
