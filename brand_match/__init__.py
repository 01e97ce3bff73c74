"""Brand-creator sponsorship matching."""

__version__ = "0.1.0"
