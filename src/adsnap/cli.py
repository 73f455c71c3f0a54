"""CLI entry point for the ad generator."""

import logging
import typer
from pathlib import Path
from typing import Optional

from . import __version__
from .config import config

app = typer.Typer(
    name="adsnap",
    help="AI-powered video ad generator",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"adsnap version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """adsnap - Turn a prompt into a stock-footage video ad."""
    pass


@app.command()
def generate(
    prompt: str = typer.Argument(
        ...,
        help="What the ad should be about"
    ),
    duration: float = typer.Option(
        15.0,
        "--duration",
        "-d",
        help="Total ad length in seconds (clamped to 1-60)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a video ad: storyboard, stock footage, narration, render."""
    from .editor import get_video_info
    from .errors import PipelineError
    from .pipeline import build_orchestrator

    setup_logging(verbose)
    typer.echo(f"🎬 Generating ad: {prompt}")

    try:
        orchestrator = build_orchestrator(config)
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    run = orchestrator.new_run(prompt, duration)
    typer.echo(f"   Target duration: {run.duration_seconds:g}s")

    try:
        result = orchestrator.execute(run)
    except PipelineError as e:
        typer.echo(f"❌ Generation failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"\n✅ {result.title}")
    typer.echo(f"   Scenes: {len(run.rendered)}/{len(run.storyboard.scenes)} rendered")
    typer.echo(f"   File: {run.final_path}")
    typer.echo(f"   URL: {result.video_url}")

    # Show video info
    try:
        info = get_video_info(run.final_path)
        typer.echo(f"   Duration: {info.duration:.1f}s")
        typer.echo(f"   Resolution: {info.width}x{info.height}")
    except Exception as e:
        typer.echo(f"⚠️  Could not read video info: {e}")


@app.command()
def parse(
    storyboard: Path = typer.Argument(
        ...,
        help="Text file holding generated storyboard text",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    output: Path = typer.Option(
        Path("storyboard.yaml"),
        "--output",
        "-o",
        help="Output YAML file path"
    ),
) -> None:
    """Parse storyboard text into a structured YAML storyboard."""
    from .agents import parse_storyboard
    from .errors import ParseFailure

    try:
        document = parse_storyboard(storyboard.read_text(encoding="utf-8"))
    except ParseFailure as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        document.to_yaml(output)
    except OSError as e:
        typer.echo(f"❌ Error saving storyboard: {e}")
        raise typer.Exit(1)

    typer.echo(f"📋 {document.title}")
    typer.echo(f"   Scenes: {len(document.scenes)}")
    for scene in document.scenes:
        visual = scene.visual_description
        preview = visual[:70] + "..." if len(visual) > 70 else visual
        typer.echo(f"   • Scene {scene.scene_number}: {preview}")
    typer.echo(f"\n✅ Storyboard saved: {output}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None,
        "--host",
        help="Bind address (defaults to HOST or 0.0.0.0)"
    ),
    port: Optional[int] = typer.Option(
        None,
        "--port",
        "-p",
        help="Port (defaults to PORT or 5001)"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Run the HTTP API and serve published videos."""
    import uvicorn
    from .api import create_app

    setup_logging(verbose)
    bind_host = host or config.host
    bind_port = port or config.port
    typer.echo(f"✅ Server running. Videos will be available at http://localhost:{bind_port}/videos/")
    uvicorn.run(
        create_app(settings=config),
        host=bind_host,
        port=bind_port,
        log_level="debug" if verbose else "info",
    )


if __name__ == "__main__":
    app()
