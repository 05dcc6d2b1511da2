"""SGF Diagram Service: game information and board diagrams from SGF records."""

__version__ = "1.0.0"
