"""
Command-line interface for ReadItOut.

Usage:
    readitout create --url URL   # Generate a podcast from a web page or tweet
    readitout create --text ...  # Generate a podcast from pasted text
    readitout list               # List your podcasts
    readitout show ID            # Show one podcast
    readitout transcript ID      # Print the timed transcript
    readitout share ID           # Toggle the public share link
    readitout delete ID          # Delete a podcast and its audio
    readitout voices             # List voice styles
    readitout serve              # Start the HTTP API
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .errors import ReadItOutError
from .pipeline import PodcastService, parse_create_request
from .settings import Settings, configure_logging, get_settings
from .storage.models import DurationType, Podcast, PodcastStatus
from .tts.voices import VOICE_STYLE_ALIASES, voice_options

app = typer.Typer(
    name="readitout",
    help="Turn articles, tweets and text into narrated podcasts",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    PodcastStatus.COMPLETED: "green",
    PodcastStatus.FAILED: "red",
    PodcastStatus.PENDING: "dim",
}


def load_config() -> Settings:
    """Load configuration from environment and .env file."""
    from dotenv import load_dotenv

    load_dotenv()
    settings = get_settings()
    configure_logging(settings.log_level)
    return settings


def _format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def _print_podcast(podcast: Podcast) -> None:
    style = STATUS_STYLES.get(podcast.status, "yellow")

    table = Table(title=podcast.title, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("ID", podcast.id)
    table.add_row("Status", f"[{style}]{podcast.status.value}[/{style}]")
    table.add_row("Source", podcast.source_url or "(pasted text)")
    table.add_row("Voice", podcast.voice_style)
    table.add_row("Duration", f"{podcast.duration_type.value} ({_format_duration(podcast.audio_duration_seconds)})")
    if podcast.audio_url:
        table.add_row("Audio", podcast.audio_url)
    table.add_row("Public", f"yes ({podcast.share_slug})" if podcast.is_public else "no")
    if podcast.error_message:
        table.add_row("Error", f"[red]{podcast.error_message}[/red]")

    console.print(table)


async def _with_service(settings: Settings, action):
    service = await PodcastService.from_settings(settings)
    try:
        return await action(service)
    finally:
        await service.close()


def _run(settings: Settings, action):
    """Run an async service action, reporting domain errors cleanly."""
    try:
        return asyncio.run(_with_service(settings, action))
    except ReadItOutError as e:
        console.print(f"[red]✗[/red] {e.message}")
        raise typer.Exit(1)


@app.command()
def create(
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Web page or tweet URL"),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to narrate"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read text to narrate from a file"),
    voice: str = typer.Option("narrator", "--voice", "-v", help="Voice style"),
    duration: DurationType = typer.Option(DurationType.FIVE_MIN, "--duration", "-d", help="Target length"),
    public: bool = typer.Option(False, "--public", help="Make the podcast public when done"),
    show_transcript: bool = typer.Option(False, "--transcript", help="Print the transcript when done"),
):
    """Generate a podcast and wait for it to finish."""
    if file is not None:
        if text is not None:
            console.print("[red]✗[/red] Use either --text or --file, not both")
            raise typer.Exit(1)
        text = file.read_text(encoding="utf-8")

    if voice not in VOICE_STYLE_ALIASES:
        console.print(f"[yellow]![/yellow] Unknown voice '{voice}', using narrator")

    settings = load_config()

    async def _create(service: PodcastService):
        request = parse_create_request(
            {
                "source_url": url,
                "source_text": text,
                "voice_style": voice,
                "duration_type": duration.value,
            }
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Generating podcast...", total=None)
            podcast = await service.create_podcast(request, wait=True)

        podcast = await service.get_podcast(podcast.id)
        if podcast.status is PodcastStatus.COMPLETED and public:
            podcast = await service.toggle_public(podcast.id)

        _print_podcast(podcast)

        if podcast.status is PodcastStatus.FAILED:
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] Podcast ready: {podcast.audio_url}")
        if show_transcript:
            transcript = await service.get_transcript(podcast.id)
            for segment in transcript.segments:
                console.print(f"[dim]{_format_duration(segment.start_time)}[/dim] {segment.text}")

    _run(settings, _create)


@app.command("list")
def list_podcasts(
    user: Optional[str] = typer.Option(None, "--user", help="Owner (defaults to DEFAULT_USER_ID)"),
):
    """List podcasts, newest first."""
    settings = load_config()

    async def _list(service: PodcastService):
        podcasts = await service.list_podcasts(user)
        if not podcasts:
            console.print("[yellow]No podcasts yet[/yellow]")
            return

        table = Table(title="Podcasts")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Length", justify="right")
        table.add_column("Public")
        table.add_column("Created")

        for podcast in podcasts:
            style = STATUS_STYLES.get(podcast.status, "yellow")
            table.add_row(
                podcast.id,
                podcast.title,
                f"[{style}]{podcast.status.value}[/{style}]",
                _format_duration(podcast.audio_duration_seconds),
                "yes" if podcast.is_public else "",
                podcast.created_at.strftime("%Y-%m-%d %H:%M"),
            )

        console.print(table)

    _run(settings, _list)


@app.command()
def show(podcast_id: str = typer.Argument(..., help="Podcast ID")):
    """Show one podcast's status and details."""
    settings = load_config()

    async def _show(service: PodcastService):
        _print_podcast(await service.get_podcast(podcast_id))

    _run(settings, _show)


@app.command()
def transcript(podcast_id: str = typer.Argument(..., help="Podcast ID")):
    """Print the timed transcript of a completed podcast."""
    settings = load_config()

    async def _transcript(service: PodcastService):
        result = await service.get_transcript(podcast_id)
        for segment in result.segments:
            console.print(
                f"[dim]{_format_duration(segment.start_time)}-{_format_duration(segment.end_time)}[/dim] "
                f"{segment.text}"
            )
        console.print(f"\n[bold]Total:[/bold] {_format_duration(result.total_duration)}")

    _run(settings, _transcript)


@app.command()
def share(podcast_id: str = typer.Argument(..., help="Podcast ID")):
    """Toggle a podcast's public share link."""
    settings = load_config()

    async def _share(service: PodcastService):
        podcast = await service.toggle_public(podcast_id)
        if podcast.is_public:
            console.print(f"[green]✓[/green] Public at /api/public/{podcast.share_slug}")
        else:
            console.print("[yellow]![/yellow] Podcast is now private")

    _run(settings, _share)


@app.command()
def delete(
    podcast_id: str = typer.Argument(..., help="Podcast ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a podcast, its transcript and its audio."""
    if not yes:
        typer.confirm(f"Delete podcast {podcast_id}?", abort=True)

    settings = load_config()

    async def _delete(service: PodcastService):
        await service.delete_podcast(podcast_id)
        console.print(f"[green]✓[/green] Deleted {podcast_id}")

    _run(settings, _delete)


@app.command()
def voices():
    """List available voice styles."""
    table = Table(title="Voice styles")
    table.add_column("Style", style="cyan")
    table.add_column("Description")

    for option in voice_options():
        table.add_row(option["id"], option["name"])

    console.print(table)
    console.print(f"Durations: {', '.join(d.value for d in DurationType)}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default SERVER_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default SERVER_PORT)"),
):
    """Start the HTTP API server."""
    import uvicorn

    from .server import create_app

    settings = load_config()
    host = host or settings.server.host
    port = port or settings.server.port

    console.print(f"[bold]Starting ReadItOut API on http://{host}:{port}[/bold]")
    console.print(f"  Store: {settings.storage.backend}")
    console.print(f"  Audio: {settings.storage.audio_dir}")
    console.print("\nPress Ctrl+C to stop\n")

    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


@app.command()
def init():
    """Initialize the project with example configuration."""
    for d in ["data", "output/audio"]:
        Path(d).mkdir(parents=True, exist_ok=True)
        console.print(f"[green]✓[/green] Created {d}/")

    env_path = Path(".env.example")
    if not env_path.exists():
        env_path.write_text(ENV_EXAMPLE)
        console.print("[green]✓[/green] Created .env.example")
    else:
        console.print("[yellow]![/yellow] .env.example already exists")

    console.print("\n[bold]Setup complete![/bold]")
    console.print("1. Copy .env.example to .env")
    console.print("2. Fill in your API keys")
    console.print("3. Run: readitout create --url https://example.com/article")


ENV_EXAMPLE = """# ReadItOut Configuration
# Copy to .env and fill in your values

# Summarization (openai or openrouter)
LLM_PROVIDER=openai
LLM_API_KEY=
LLM_MODEL=gpt-4o-mini

# Text-to-speech: Google Cloud TTS first, ElevenLabs as fallback
TTS_GOOGLE_API_KEY=
TTS_ELEVENLABS_API_KEY=

# Optional Twitter/X thread API
TWITTER_RAPIDAPI_KEY=

# Storage (memory or sqlite)
STORAGE_BACKEND=sqlite
STORAGE_DB_PATH=data/readitout.db
STORAGE_AUDIO_DIR=output/audio
STORAGE_PUBLIC_BASE_URL=http://localhost:8000/audio

SERVER_HOST=127.0.0.1
SERVER_PORT=8000

LOG_LEVEL=INFO
"""


if __name__ == "__main__":
    app()
