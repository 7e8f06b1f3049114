"""Start the HTTP gateway."""

import os

import typer
import uvicorn

from genai_gateway.core.bootstrap import bootstrap
from genai_gateway.core.error_handler import safe_entrypoint
from genai_gateway.server.app import CONFIG_ENV_VAR, create_app
from genai_gateway.utils.logging import get_logger, parse_log_level

app = typer.Typer(name="serve", help="Start the HTTP gateway")
log = get_logger("cli.serve")


@app.command()
@safe_entrypoint("cli.serve.start")
def start(
    host: str | None = typer.Option(None, help="Host to bind to (default from config)"),
    port: int | None = typer.Option(None, help="Port to listen on (default from config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
    config_file: str | None = typer.Option(
        None, "--config-file", help="YAML file layered over the defaults"
    ),
    log_level: str = typer.Option(
        "INFO", "--log-level", help="Logging level (e.g., DEBUG, INFO, WARNING)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose error output"),
) -> None:
    """Serve POST /api/chat with uvicorn."""
    level = parse_log_level(log_level)
    ctx = bootstrap(config_file, log_level=level)

    bind_host = host or ctx.config.server.host
    bind_port = port or ctx.config.server.port
    typer.echo(f"Starting server on {bind_host}:{bind_port}")

    missing = ctx.providers.missing_keys()
    for provider_id, env_name in missing.items():
        typer.echo(f"  {provider_id.value}: disabled ({env_name} not set)")

    if reload:
        # The reloader re-imports the app in a child process
        typer.echo("Auto-reload enabled")
        if config_file:
            os.environ[CONFIG_ENV_VAR] = config_file
        uvicorn.run(
            "genai_gateway.server.app:app_factory",
            factory=True,
            host=bind_host,
            port=bind_port,
            reload=True,
            log_level=log_level.lower(),
        )
        return

    log.info(f"Serving with {len(ctx.catalog)} catalog candidates")
    uvicorn.run(
        create_app(ctx), host=bind_host, port=bind_port, log_level=log_level.lower()
    )
