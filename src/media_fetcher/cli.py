"""CLI interface for media fetcher."""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import Settings, configure_structlog, get_settings
from .delivery.webhook import send_file_to_webhook
from .exceptions import MediaFetcherError, NoSuitableFormatError
from .ingestion.downloader import get_media_info
from .ingestion.formats import select_format
from .service import MediaProcessingService
from .storage.media import list_artifacts, sanitize_title
from .transcript.captions import read_caption_file
from .transcript.document import write_transcript_document

app = typer.Typer(help="Media Fetcher - download video, audio or transcripts from media URLs")
console = Console()


class Provider(str, Enum):
    GROQ = "groq"
    GEMINI = "gemini"


def _create_service(settings: Settings) -> MediaProcessingService:
    """Create a MediaProcessingService with default dependencies."""
    return MediaProcessingService(settings)


def _load_settings(provider: Provider | None = None) -> Settings:
    settings = get_settings()
    if provider is not None:
        settings = settings.model_copy(update={"stt_provider": provider.value})
    return settings


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    configure_structlog("DEBUG" if verbose else get_settings().log_level)


@app.command()
def process(
    url: str = typer.Argument(..., help="Media URL"),
    media_type: str = typer.Option("video", "--type", "-t", help="Output type: video, audio or text"),
    provider: Optional[Provider] = typer.Option(None, "--provider", "-p", help="Speech-to-text provider"),
):
    """Download a video, extract its audio or build a transcript document."""
    settings = _load_settings(provider)
    service = _create_service(settings)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Starting...", total=None)
        try:
            result = service.process(
                url,
                media_type,
                on_progress=lambda msg: progress.update(task, description=msg),
            )
        except MediaFetcherError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    info = result.media_info
    console.print(f"\n[bold]{info.title}[/bold]")
    console.print(f"Duration: {info.duration_display}s")
    console.print(f"[green]{result.human_message}[/green]")
    console.print(f"File: {result.output_artifact_path}")
    console.print(f"URL: {result.file_url}")

    if result.extraction_source is not None:
        console.print(f"Transcript source: {result.extraction_source.value}")
        artifacts = list_artifacts(service.output_dir, Path(result.output_artifact_path).stem)
        console.print("Artifacts: " + ", ".join(path.name for path in artifacts))
    if result.delivered:
        console.print("Delivered to webhook")


@app.command()
def info(
    url: str = typer.Argument(..., help="Media URL"),
):
    """Show media metadata without downloading."""
    settings = get_settings()
    try:
        media = get_media_info(url, binary=settings.ytdlp_binary)
    except MediaFetcherError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Media Info", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Title", media.title)
    table.add_row("Duration", f"{media.duration_display}s")
    table.add_row("Page", media.webpage_url)
    table.add_row("Thumbnail", media.thumbnail_url or "-")
    table.add_row("File stem", sanitize_title(media.title))
    table.add_row("Formats", str(len(media.formats)))
    console.print(table)


@app.command()
def formats(
    url: str = typer.Argument(..., help="Media URL"),
    video: bool = typer.Option(True, "--video/--audio", help="Select a combined video or an audio-only encoding"),
):
    """List available encodings and the one a direct link would use."""
    settings = get_settings()
    try:
        media = get_media_info(url, binary=settings.ytdlp_binary)
    except MediaFetcherError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Formats: {media.title}")
    table.add_column("ID", style="cyan")
    table.add_column("Ext", style="magenta")
    table.add_column("Video", style="green")
    table.add_column("Audio", style="green")
    table.add_column("Quality", style="yellow")

    for fmt in media.formats:
        table.add_row(
            fmt.format_id,
            fmt.ext or "-",
            "yes" if fmt.has_video else "no",
            "yes" if fmt.has_audio else "no",
            fmt.quality.value,
        )
    console.print(table)

    try:
        selected = select_format(media.formats, want_video=video)
    except NoSuitableFormatError as e:
        console.print(f"[yellow]{e}[/yellow]")
        raise typer.Exit(1)
    console.print(f"Selected: [bold]{selected.format_id}[/bold]")


@app.command()
def convert(
    captions: Path = typer.Argument(..., exists=True, dir_okay=False, help="WebVTT caption file"),
    output: Optional[Path] = typer.Argument(None, help="Output .docx path"),
    title: Optional[str] = typer.Option(None, "--title", help="Document title"),
):
    """Convert a caption file into a transcript document."""
    output = output or captions.with_suffix(".docx")
    try:
        cues = read_caption_file(captions)
    except MediaFetcherError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    write_transcript_document(cues, title or captions.stem, output)
    console.print(f"[green]Wrote {len(cues)} cues to {output}[/green]")


@app.command()
def deliver(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Artifact to send"),
    title: Optional[str] = typer.Option(None, "--title", help="Title metadata"),
    source: Optional[str] = typer.Option(None, "--source", help="Source URL metadata"),
):
    """Send an artifact to the configured storage webhook."""
    settings = get_settings()
    if not settings.webhook_configured:
        console.print("[red]Error: WEBHOOK_URL environment variable not set.[/red]")
        raise typer.Exit(1)

    metadata = {"title": title or file.stem, "source": source}
    try:
        send_file_to_webhook(
            file,
            settings.webhook_url,
            metadata,
            origin=settings.delivery_origin,
            timeout=settings.webhook_timeout,
        )
    except MediaFetcherError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Sent {file.name} to webhook[/green]")


@app.command()
def config():
    """Show current configuration."""
    settings = get_settings()
    console.print("\n[bold]Current Configuration[/bold]")
    console.print(f"Speech-to-text provider: {settings.stt_provider}")
    console.print(f"Groq API Key: {'***' + settings.groq_api_key[-4:] if settings.groq_api_key else 'Not set'}")
    console.print(f"Gemini API Key: {'***' + settings.gemini_api_key[-4:] if settings.gemini_api_key else 'Not set'}")
    console.print(f"Output Directory: {settings.output_directory}")
    console.print(f"Public URL: {settings.public_url('')}")
    console.print(f"Link mode: {settings.link_mode}")
    console.print(f"Webhook: {'configured' if settings.webhook_configured else 'Not set'}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
):
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"Media fetcher server running at http://{host}:{port}")
    uvicorn.run("media_fetcher.api.routes:create_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    app()
