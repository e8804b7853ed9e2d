"""Qt integration for Folio."""
