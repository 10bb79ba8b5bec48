"""pgn-mule: delayed, filtered PGN relay for chess broadcasts."""

__version__ = "2.0.1"
