import typer
from pathlib import Path
from typing import Optional
from rich.console import Console

from crfbatch.config.loader import load_config
from crfbatch.config.models import AppConfig
from crfbatch.domain.errors import ConfigError, DiscoveryError, InsufficientDataError
from crfbatch.infrastructure.audit_log import AuditLog
from crfbatch.infrastructure.event_bus import EventBus
from crfbatch.infrastructure.ffmpeg import FFmpegAdapter
from crfbatch.infrastructure.ffprobe import FFprobeAdapter
from crfbatch.infrastructure.file_scanner import FileScanner
from crfbatch.infrastructure.logging import setup_logging
from crfbatch.pipeline.orchestrator import Orchestrator
from crfbatch.ui.progress import ProgressDisplay
from crfbatch.ui.summary import render_summary

app = typer.Typer(help="crfbatch - bitrate-aware batch H.265 transcoder")


def apply_overrides(
    config: AppConfig,
    threads: Optional[int] = None,
    extension: Optional[str] = None,
    log_path: Optional[Path] = None,
    reference_path: Optional[Path] = None,
    debug: bool = False,
    progress: Optional[bool] = None,
) -> AppConfig:
    """Applies CLI flags on top of the loaded config."""
    if threads is not None:
        if threads < 1:
            raise ConfigError(f"--threads must be >= 1, got {threads}")
        config.general.threads = threads
    if extension is not None:
        if not extension:
            raise ConfigError("--extension must not be empty")
        config.general.extension = extension
    if log_path is not None: config.general.log_path = str(log_path)
    if reference_path is not None: config.general.reference_path = str(reference_path)
    if debug: config.general.debug = True
    if progress is not None: config.general.show_progress = progress
    return config


def require_dirs(input_dir: Optional[Path], output_dir: Optional[Path]):
    if input_dir is None or output_dir is None:
        raise ConfigError("Input and output directory paths must be provided (--in and --out)")
    return input_dir, output_dir


def prepare_output_dir(output_dir: Path) -> Path:
    """Creates the output directory; anything that can't hold outputs is a ConfigError."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create output directory {output_dir}: {e}") from e
    if not output_dir.is_dir():
        raise ConfigError(f"Output path is not a directory: {output_dir}")
    return output_dir


@app.command()
def transcode(
    input_dir: Optional[Path] = typer.Option(None, "--in", "-i", help="Input directory path"),
    output_dir: Optional[Path] = typer.Option(None, "--out", "-o", help="Output directory path"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", help="Override number of concurrent jobs"),
    extension: Optional[str] = typer.Option(None, "--extension", "-e", help="Input file suffix to match (case-sensitive)"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Path to log file (overrides config)"),
    reference_path: Optional[Path] = typer.Option(None, "--reference-path", help="Path to input/output reference file"),
    progress: Optional[bool] = typer.Option(None, "--progress/--no-progress", help="Show progress bar"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging"),
):
    """Transcode every matching video in a directory with a bitrate-derived CRF."""
    console = Console()
    try:
        input_dir, output_dir = require_dirs(input_dir, output_dir)
        config = apply_overrides(
            load_config(config_path),
            threads=threads,
            extension=extension,
            log_path=log_path,
            reference_path=reference_path,
            debug=debug,
            progress=progress,
        )
        prepare_output_dir(output_dir)
        try:
            logger = setup_logging(Path(config.general.log_path), debug=config.general.debug)
        except OSError as e:
            raise ConfigError(f"Cannot open log file {config.general.log_path}: {e}") from e
    except ConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger.info(f"crfbatch started: input={input_dir}, output={output_dir}")
    logger.info(
        f"Config: threads={config.general.threads}, extension={config.general.extension}, "
        f"codec={config.encoder.video_codec}, preset={config.encoder.preset}"
    )

    bus = EventBus()
    orchestrator = Orchestrator(
        config=config,
        event_bus=bus,
        file_scanner=FileScanner(extension=config.general.extension),
        ffprobe_adapter=FFprobeAdapter(),
        ffmpeg_adapter=FFmpegAdapter(config.encoder),
        audit_log=AuditLog(Path(config.general.reference_path)),
    )
    display = ProgressDisplay(bus, console=console, enabled=config.general.show_progress)

    try:
        with display:
            summary = orchestrator.run(input_dir, output_dir)
    except DiscoveryError as e:
        logger.error(f"Failed to find video files: {e}")
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except InsufficientDataError as e:
        logger.warning(str(e))
        typer.secho(f"No file was encoded successfully: {e}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user (Ctrl+C)")
        typer.secho("\nTranscoding stopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)

    render_summary(summary, console)


if __name__ == "__main__":
    app()
