"""Main application entry point for Handscribe."""

import sys
import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .config import HandscribeConfig
from .exceptions import HandscribeError
from .models.image import ImageSource
from .services.pipeline import TranscriptionPipeline, create_backend
from .ui import render_history, render_record

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(config: HandscribeConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/handscribe.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("Handscribe starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def _open_pipeline(config: HandscribeConfig) -> TranscriptionPipeline:
    try:
        return TranscriptionPipeline.from_config(config)
    except HandscribeError as e:
        logger.error(f"Failed to open history: {e}")
        raise click.ClickException(f"Failed to open history: {e}") from e


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Path to configuration YAML file (default: built-in settings)")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"],
                                               case_sensitive=False),
              default=None, help="Override the configured logging level")
@click.version_option("0.1.0", prog_name="Handscribe")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """Handscribe - extract text from images and keep a searchable history."""
    try:
        config = HandscribeConfig(config_path)
    except HandscribeError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(config, log_level or config.get('logging.level', 'INFO'))
    ctx.obj = config


@cli.command()
@click.argument("image", required=False)
@click.option("--offline", is_flag=True, help="Use canned demo documents instead of the Recognition Service")
@click.option("--seed", type=int, default=None, help="Seed for the offline document choice")
@click.pass_obj
def recognize(config: HandscribeConfig, image: Optional[str], offline: bool, seed: Optional[int]) -> None:
    """Transcribe IMAGE (a path or file:// URI) and save it to history."""
    if image is None and not offline:
        raise click.UsageError("Give an IMAGE or use --offline")

    try:
        pipeline = TranscriptionPipeline.from_config(config)
        backend = create_backend(config, offline=offline, seed=seed)
        source = ImageSource.from_path(image) if image else None
        with console.status("Processing image..."):
            record = asyncio.run(pipeline.run(backend, source))
    except HandscribeError as e:
        logger.error(f"Recognition failed: {e}")
        raise click.ClickException(f"Failed to process image: {e}") from e

    console.print(render_record(record))


@cli.command()
@click.option("--search", "substring", default="", help="Only show records containing this text")
@click.pass_obj
def history(config: HandscribeConfig, substring: str) -> None:
    """List past transcriptions, newest first."""
    pipeline = _open_pipeline(config)

    if pipeline.history.size() == 0:
        console.print("No transcriptions yet. Recognize an image to get started.")
        return

    records = list(pipeline.search(substring))
    if not records:
        console.print(f"No transcriptions match '{escape(substring)}'.")
        return

    console.print(render_history(records, substring))


@cli.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def clear(config: HandscribeConfig, yes: bool) -> None:
    """Clear all transcription history. This cannot be undone."""
    pipeline = _open_pipeline(config)

    if pipeline.history.size() == 0:
        console.print("History is already empty.")
        return

    if not yes:
        click.confirm("Are you sure you want to clear all transcription history?", abort=True)

    try:
        count = pipeline.clear_history()
    except HandscribeError as e:
        raise click.ClickException(f"Failed to clear history: {e}") from e

    console.print(f"Cleared {count} transcriptions.")


def main() -> None:
    """Main entry point for Handscribe application."""
    cli()


if __name__ == "__main__":
    main()
