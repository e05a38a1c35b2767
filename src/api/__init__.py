"""API HTTP (WSGI)."""
