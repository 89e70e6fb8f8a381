"""mailvault - email record ingestion and archival."""

__version__ = "0.1.0"
