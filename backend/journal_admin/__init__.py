"""Journal admin backend: access control for the journal's admin dashboard."""

__version__ = "0.1.0"
