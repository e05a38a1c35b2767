"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import FinalResponse, ProbeStatus


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("UP-DOWN", style="bold cyan")
    subtitle = Text("Reachability checks • Host + registrable domain", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_results_table(final: FinalResponse, *, cache_status: str | None = None) -> Table:
    """Tabla Rich con un resultado por probe."""

    title = final.requested_url
    if cache_status:
        title = f"{title} [dim](cache {cache_status})[/dim]"

    table = Table(title=title)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("URL", style="magenta")
    table.add_column("Status", no_wrap=True)
    table.add_column("Code", justify="right")
    table.add_column("Details", style="dim")
    table.add_column("ms", justify="right", style="dim")

    for result in final.results:
        status_style = "bold green" if result.status is ProbeStatus.UP else "bold red"
        table.add_row(
            result.kind.value,
            result.url,
            Text(result.status.value, style=status_style),
            "" if result.status_code is None else str(result.status_code),
            result.status_text,
            "" if result.duration_ms is None else str(result.duration_ms),
        )
    return table
