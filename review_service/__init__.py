"""Review submission service: an append-only review list over HTTP."""

__version__ = "1.0.0"
