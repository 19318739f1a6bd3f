"""Utility helpers (scanning, validation, versioning)."""
