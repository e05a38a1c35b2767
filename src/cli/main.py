"""CLI principal (Typer).

Comandos:
- `serve`: levanta la API WSGI (dev server de Flask).
- `check`: ejecuta el mismo pipeline que la API, sin auth, y muestra el resultado.
- `doctor`: diagnósticos del entorno.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from api.app import build_cache, create_app
from cli import doctor
from cli.logging import configure_logging
from cli.ui_components import build_results_table, print_banner
from core.config import AppSettings
from core.domain.errors import UpDownError
from core.services.check_pipeline import run_check

app = typer.Typer(
    no_args_is_help=True,
    help="Is a site UP or DOWN? Probe a URL's host and registrable domain.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override UPDOWN_LOG_LEVEL."),
) -> None:
    settings = AppSettings()
    configure_logging(log_level or settings.log_level)


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address (default: UPDOWN_HOST)."),
    port: int = typer.Option(None, help="Port (default: UPDOWN_PORT)."),
    debug: bool = typer.Option(False, help="Flask debug mode (reloader + debugger)."),
) -> None:
    """Run the HTTP API."""

    settings = AppSettings()
    if not settings.api_key:
        _console.print("[yellow]Warning:[/yellow] no API_KEY configured; every request will get 401.")

    flask_app = create_app(settings)
    flask_app.run(host=host or settings.host, port=port or settings.port, debug=debug)


@app.command()
def check(
    url: str = typer.Argument(..., help="URL or bare host (https:// is assumed)."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON body."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the response cache."),
    dns_check: bool = typer.Option(None, "--dns-check/--no-dns-check", help="Toggle the DoH gate."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No banner."),
) -> None:
    """Check a single URL from the terminal."""

    settings = AppSettings()
    if dns_check is not None:
        settings = settings.model_copy(update={"dns_check_enabled": dns_check})
    cache = None if no_cache else build_cache(settings)

    if not (as_json or quiet):
        print_banner(_console)

    try:
        outcome = asyncio.run(run_check(url, settings=settings, cache=cache))
        # Sin respuesta HTTP que entregar: se escribe en cache al terminar.
        if outcome.pending_write is not None:
            outcome.pending_write()
    except UpDownError as exc:
        _console.print(f"[red]Error ({exc.http_status}):[/red] {exc.message}")
        raise typer.Exit(code=2) from exc
    finally:
        if cache is not None:
            cache.close()

    if as_json:
        typer.echo(outcome.response.body)
        return

    _console.print(build_results_table(outcome.final, cache_status=outcome.cache_status))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
