"""API HTTP (Flask).

Por qué Flask:
- El servicio es un único handler sin estado; WSGI basta y cualquier servidor
  (gunicorn, waitress, el dev server) lo puede servir.
- `Response.call_on_close` ejecuta la escritura en cache *después* de entregar
  la respuesta, sin retrasarla.

Contrato:
- `GET /?url=...` o `POST /` (en cualquier path) con `{"url": "..."}`; otro método => 405.
- Header `x-api-key` igual al secreto configurado; si no => 401.
- El veredicto UP/DOWN va en el body; el código HTTP solo dice si el check corrió.
"""

from __future__ import annotations

import asyncio
import hmac
import logging

import httpx
from flask import Flask, Response, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from adapters.response_cache import DiskResponseCache, NullResponseCache
from core.config import AppSettings
from core.domain.errors import InvalidInput, MethodNotAllowed, Unauthorized, UpDownError
from core.domain.models import CheckRequest
from core.interfaces.cache import ResponseStore
from core.services.check_pipeline import run_check

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")


def build_cache(settings: AppSettings) -> ResponseStore:
    if not settings.cache_enabled:
        return NullResponseCache()
    try:
        return DiskResponseCache(settings.cache_dir)
    except Exception as exc:
        logger.warning("Response cache unavailable (%s); running without cache", exc)
        return NullResponseCache()


def _check_api_key(settings: AppSettings) -> None:
    supplied = request.headers.get("x-api-key")
    expected = settings.api_key
    if not expected or supplied is None:
        raise Unauthorized()
    if not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized()


def _parse_input() -> CheckRequest:
    if request.method == "POST":
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise InvalidInput("Request body must be a JSON object with a `url` field.")
    else:
        payload = request.args.to_dict()
    try:
        return CheckRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput(str(exc)) from exc


def _error_response(message: str, status: int) -> Response:
    response = jsonify({"error": message})
    response.status_code = status
    return response


def create_app(
    settings: AppSettings | None = None,
    cache: ResponseStore | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Flask:
    """Construye la app WSGI.

    Los handlers de error se registran una sola vez aquí (equivalente a un
    hook global de pánico): nada sale de la app sin pasar por ellos.
    """

    settings = settings or AppSettings()
    store = cache if cache is not None else build_cache(settings)

    app = Flask(__name__)

    @app.errorhandler(UpDownError)
    def handle_updown_error(exc: UpDownError) -> Response:
        if exc.http_status >= 500:
            logger.error("Request failed: %s", exc.message)
        return _error_response(exc.message, exc.http_status)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException) -> Response:
        return _error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception) -> Response:
        logger.exception("Unhandled error while checking %s", request.url)
        return _error_response("Internal Server Error", 500)

    methods = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

    # El path no se usa: el servicio responde igual en cualquier ruta.
    @app.route("/", defaults={"_path": ""}, methods=methods)
    @app.route("/<path:_path>", methods=methods)
    def check(_path: str) -> Response:
        # Auth primero: sin clave válida no se valida ni el método.
        _check_api_key(settings)
        if request.method not in ALLOWED_METHODS:
            raise MethodNotAllowed()

        check_request = _parse_input()
        outcome = asyncio.run(
            run_check(check_request.url, settings=settings, cache=store, transport=transport)
        )

        cached = outcome.response
        response = Response(
            cached.body,
            status=cached.status_code,
            mimetype="application/json",
        )
        for name, value in cached.headers.items():
            response.headers[name] = value
        if outcome.pending_write is not None:
            response.call_on_close(outcome.pending_write)
        return response

    return app
