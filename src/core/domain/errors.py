"""Errores de petición.

Cada error conoce el código HTTP con el que la API lo expone. Los fallos de
probe no están aquí: se devuelven como resultados `DOWN`.
"""

from __future__ import annotations


class UpDownError(Exception):
    """Base de los errores que abortan una petición."""

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(UpDownError):
    http_status = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class MethodNotAllowed(UpDownError):
    http_status = 405

    def __init__(self, message: str = "Method not allowed. Use GET or POST.") -> None:
        super().__init__(message)


class InvalidInput(UpDownError):
    http_status = 400


class InvalidUrl(UpDownError):
    http_status = 400


class MissingHost(UpDownError):
    http_status = 400

    def __init__(self, message: str = "Host is missing.") -> None:
        super().__init__(message)


class DomainCheckFailed(UpDownError):
    """El resolver DoH respondió con un `Status` distinto de 0 (NOERROR)."""

    http_status = 400

    def __init__(self, status: int, host: str | None = None) -> None:
        target = f" for {host}" if host else ""
        super().__init__(f"Domain check failed{target}: DNS status {status}")
        self.status = status
        self.host = host
