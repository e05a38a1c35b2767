"""Adaptadores de I/O: HTTP, DNS-over-HTTPS y cache en disco."""
