"""
Provider inspection commands for the CLI.
"""

import typer
from rich.console import Console
from rich.table import Table

from genai_gateway.core.bootstrap import bootstrap
from genai_gateway.core.error_handler import safe_entrypoint
from genai_gateway.core.exceptions import CLIError
from genai_gateway.routing.types import Capability, ProviderId
from genai_gateway.utils.logging import parse_log_level

app = typer.Typer(name="provider", help="Inspect provider families")
console = Console()


def _render_status_table(statuses: list[dict]) -> None:
    """Render provider status using a Rich table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Provider", style="cyan")
    table.add_column("Configured")
    table.add_column("API key env")
    for capability in Capability:
        table.add_column(capability.value, justify="right")

    for status in statuses:
        table.add_row(
            status["provider"],
            "✓" if status["configured"] else "✗",
            status["apiKeyEnv"] or "-",
            *(str(status["models"][c.value]) for c in Capability),
        )

    console.print(table)


@app.command(name="list")
@safe_entrypoint("cli.provider.list")
def list_providers(
    provider: str | None = typer.Option(
        None, "--provider", help="Specific provider to list models for"
    ),
    config_file: str | None = typer.Option(None, "--config-file", help="Config YAML"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
) -> None:
    """List provider families, or the catalog models of one family."""
    ctx = bootstrap(config_file, log_level=parse_log_level(log_level))

    if provider is None:
        _render_status_table(ctx.service.provider_status())
        return

    try:
        provider_id = ProviderId(provider)
    except ValueError as e:
        choices = ", ".join(p.value for p in ProviderId)
        raise CLIError(f"Unknown provider '{provider}' (choose from {choices})") from e

    state = "configured" if ctx.providers.is_configured(provider_id) else "not configured"
    typer.echo(f"Provider: {provider_id.value} ({state})")
    candidates = list(ctx.catalog.partition(provider_id))
    if not candidates:
        typer.echo("No models in catalog")
        return
    typer.echo("Models:")
    for candidate in candidates:
        typer.echo(
            f"  - {candidate.model_name} "
            f"[{candidate.capability.value}, priority {candidate.priority}]"
        )
