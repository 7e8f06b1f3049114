"""Route a single chat, analysis or generation request from the terminal."""

import asyncio
import base64
import mimetypes
from pathlib import Path

import typer

from genai_gateway.core.bootstrap import bootstrap
from genai_gateway.core.error_handler import safe_entrypoint
from genai_gateway.core.exceptions import CLIError
from genai_gateway.routing.types import MediaType
from genai_gateway.service.chat_service import ChatMode, ChatRequest, ChatResponse
from genai_gateway.utils.logging import get_logger, parse_log_level

app = typer.Typer(name="run", help="Route a single request from the terminal")
log = get_logger("cli.run")


def _image_to_data_uri(path: Path) -> str:
    """Read an image file into a data-URI."""
    if not path.is_file():
        raise CLIError(f"Image file not found: {path}")
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise CLIError(f"Not an image file: {path}")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _save_media(text: str, output: Path) -> Path:
    """Write the data-URI of a generated-media reply to `output`."""
    _, _, data_uri = text.partition(":")
    _, _, payload = data_uri.partition(",")
    output.write_bytes(base64.b64decode(payload))
    return output


def _execute(
    request: ChatRequest,
    config_file: str | None,
    log_level: str,
) -> ChatResponse:
    ctx = bootstrap(config_file, log_level=parse_log_level(log_level))
    return asyncio.run(ctx.service.handle(request))


def _print_response(response: ChatResponse, output: Path | None = None) -> None:
    if response.model_used:
        source = f" via {response.source}" if response.source else ""
        typer.echo(f"Model: {response.model_used}{source}")

    if response.success and response.text.startswith(("IMAGE_GENERATED:", "VIDEO_GENERATED:")):
        if output is not None:
            typer.echo(f"Saved to {_save_media(response.text, output)}")
        else:
            typer.echo(f"Generated media ({len(response.text)} chars of data-URI)")
            typer.echo("Use --output to save it to a file")
    else:
        typer.echo("\nResponse:")
        typer.echo(response.text)

    if not response.success:
        raise typer.Exit(code=2)


@app.command()
@safe_entrypoint("cli.run.chat")
def chat(
    message: str = typer.Argument(..., help="Message to send"),
    config_file: str | None = typer.Option(None, "--config-file", help="Config YAML"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose error output"),
) -> None:
    """Send a text chat message."""
    request = ChatRequest(message=message, mode=ChatMode.CHAT)
    _print_response(_execute(request, config_file, log_level))


@app.command()
@safe_entrypoint("cli.run.analyze")
def analyze(
    images: list[Path] = typer.Argument(..., help="Image files to analyze"),
    message: str | None = typer.Option(None, "--message", "-m", help="Question about the images"),
    config_file: str | None = typer.Option(None, "--config-file", help="Config YAML"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose error output"),
) -> None:
    """Analyze one or more images."""
    request = ChatRequest(
        message=message,
        images=[_image_to_data_uri(path) for path in images],
        mode=ChatMode.ANALYZE,
    )
    _print_response(_execute(request, config_file, log_level))


@app.command()
@safe_entrypoint("cli.run.generate")
def generate(
    prompt: str = typer.Argument(..., help="What to generate"),
    video: bool = typer.Option(False, "--video", help="Generate a video instead of an image"),
    reference: list[Path] = typer.Option(
        [], "--reference", "-r", help="Reference images analyzed before generating"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="File to write the media to"),
    config_file: str | None = typer.Option(None, "--config-file", help="Config YAML"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose error output"),
) -> None:
    """Generate an image (or video) from a prompt."""
    request = ChatRequest(
        message=prompt,
        images=[_image_to_data_uri(path) for path in reference],
        mode=ChatMode.GENERATE,
        media_type=MediaType.VIDEO if video else MediaType.IMAGE,
    )
    log.debug(f"Generating {request.media_type.value} with {len(reference)} reference(s)")
    _print_response(_execute(request, config_file, log_level), output)
