"""EventCTG: events and users over MongoDB."""

__version__ = "1.0.0"
