"""Main CLI entry point."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import click

from .. import __version__
from ..config import Config, ConfigManager
from ..core.interfaces import (
    IDirectoryMonitor,
    IDirectoryPipeline,
    IDownloadManager,
    IMetadataService,
    ISubtitleResolver,
    ITranslationFallback,
)
from ..core.models import PipelineResult, PipelineStatus, SubtitleRecord
from ..core.services import QualityRanker
from ..infrastructure import Container, setup_logging
from ..utils import AutoSubtitleError, ConfigurationError


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="auto-subtitle")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Auto Subtitle - Find and download subtitles for new movies."""
    # Initialize context object
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Skip configuration loading for commands that don't need it
    if ctx.invoked_subcommand == "init":
        return

    try:
        # Load configuration
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        # Set up logging
        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        # Create container
        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Initialization error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
def init(output: Path) -> None:
    """Initialize configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                return

        # Create directory if needed
        output.parent.mkdir(parents=True, exist_ok=True)

        # Create default config
        ConfigManager.create_default_config(output)
        click.echo(f"Configuration file created at: {output}")
        click.echo("Please edit the configuration file with your API keys and preferences.")

    except Exception as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and prerequisites."""
    config = ctx.obj["config"]

    errors = _validate_prerequisites(config)
    if errors:
        for error in errors:
            click.echo(f"✗ {error}", err=True)
        click.echo("Validation failed", err=True)
        sys.exit(1)

    click.echo("All prerequisites validated successfully")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show system status and configuration."""
    config = ctx.obj["config"]

    click.echo("Auto Subtitle Status")
    click.echo("=" * 40)

    click.echo(f"LLM Provider: {config.llm.provider}")
    click.echo(f"LLM Model: {config.llm.model}")
    click.echo(f"TMDb Configured: {'✓' if config.tmdb.api_key else '✗'}")
    click.echo(f"OpenSubtitles Configured: {'✓' if config.opensubtitles.api_key else '✗'}")
    click.echo(
        f"OpenSubtitles Account: "
        f"{'✓' if config.opensubtitles.username and config.opensubtitles.password else '✗'}"
    )
    click.echo(f"Watch Directory: {config.watcher.watch_dir or 'not set'}")
    click.echo(f"Preferred Languages: {', '.join(config.subtitles.preferred_languages)}")
    click.echo(f"Translation Target: {config.subtitles.target_language}")
    click.echo(f"Download Directory: {config.subtitles.download_dir}")


@cli.command()
@click.argument(
    "directory", required=False, type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.pass_context
def watch(ctx: click.Context, directory: Optional[Path]) -> None:
    """Watch a directory and fetch subtitles for new movies."""
    config = ctx.obj["config"]
    container = ctx.obj["container"]

    # Override config with command line argument
    if directory:
        config.watcher.watch_dir = str(directory)

    try:
        asyncio.run(_run_watch(container))
    except KeyboardInterrupt:
        click.echo("\nStopped watching.")
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def process(ctx: click.Context, directory: Path) -> None:
    """Process a single movie directory."""
    container = ctx.obj["container"]

    try:
        result = asyncio.run(_run_process(container, directory, is_file=False))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _display_result(result)
    if not result.is_benign:
        sys.exit(1)


@cli.command("process-file")
@click.argument("movie_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def process_file(ctx: click.Context, movie_file: Path) -> None:
    """Process a given movie file, skipping candidate selection."""
    container = ctx.obj["container"]

    try:
        result = asyncio.run(_run_process(container, movie_file, is_file=True))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _display_result(result)
    if not result.is_benign:
        sys.exit(1)


@cli.command("search-movies")
@click.argument("query")
@click.pass_context
def search_movies(ctx: click.Context, query: str) -> None:
    """Search movies by title."""
    container = ctx.obj["container"]

    try:
        asyncio.run(_run_search_movies(container, query))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("movie-details")
@click.argument("movie_id")
@click.pass_context
def movie_details(ctx: click.Context, movie_id: str) -> None:
    """Show details of a movie by TMDb ID."""
    container = ctx.obj["container"]

    try:
        asyncio.run(_run_movie_details(container, movie_id))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("search-subtitles")
@click.option("--title", "-t", default="", help="Movie title")
@click.option("--year", "-y", type=int, help="Release year")
@click.option("--language", "-l", default="zh-CN", show_default=True, help="Language code")
@click.option("--tmdb-id", help="TMDb movie ID")
@click.pass_context
def search_subtitles(
    ctx: click.Context,
    title: str,
    year: Optional[int],
    language: str,
    tmdb_id: Optional[str],
) -> None:
    """Search subtitles by TMDb ID and/or title."""
    container = ctx.obj["container"]

    if not title and not tmdb_id:
        click.echo("Error: --title or --tmdb-id is required", err=True)
        sys.exit(1)

    try:
        asyncio.run(_run_search_subtitles(container, tmdb_id, title, year, language))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file_id", type=int)
@click.argument("file_name")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to save into (defaults to the configured download directory)",
)
@click.pass_context
def download(ctx: click.Context, file_id: int, file_name: str, output_dir: Optional[Path]) -> None:
    """Download a subtitle file by its file ID."""
    container = ctx.obj["container"]

    try:
        path = asyncio.run(_run_download(container, file_id, file_name, output_dir))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Subtitle saved to: {path}")


@cli.command()
@click.argument("subtitle_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--target", "-t", help="Target language (defaults to the configured one)")
@click.pass_context
def translate(ctx: click.Context, subtitle_file: Path, target: Optional[str]) -> None:
    """Translate a subtitle file with the configured LLM."""
    container = ctx.obj["container"]

    try:
        path = asyncio.run(_run_translate(container, subtitle_file, target))
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Translation saved to: {path}")


@cli.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List manually downloaded subtitles, newest first."""
    container = ctx.obj["container"]

    try:
        download_manager = container.get(IDownloadManager)  # type: ignore
    except AutoSubtitleError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    files = download_manager.list_history()
    if not files:
        click.echo("No downloaded subtitles")
        return

    for item in files:
        click.echo(
            f"{item.downloaded_at:%Y-%m-%d %H:%M}  {item.size_bytes / 1024:8.1f} KB  "
            f"{item.file_name}"
        )


async def _run_watch(container: Container) -> None:
    """Run the directory monitor until interrupted."""
    monitor = container.get(IDirectoryMonitor)  # type: ignore

    try:
        await monitor.start()
        status = monitor.get_status()
        click.echo(f"Watching {status.watch_dir} (press Ctrl+C to stop)")
        while True:
            await asyncio.sleep(3600)
    finally:
        await monitor.stop()
        await container.close()


async def _run_process(container: Container, path: Path, is_file: bool) -> PipelineResult:
    """Run the pipeline for a directory or a movie file."""
    try:
        pipeline = container.get(IDirectoryPipeline)  # type: ignore
        if is_file:
            return await pipeline.process_file(path)
        return await pipeline.process_directory(path)
    finally:
        await container.close()


async def _run_search_movies(container: Container, query: str) -> None:
    """Search movies and print the results."""
    try:
        metadata_service = container.get(IMetadataService)  # type: ignore
        movies = await metadata_service.search(query)
    finally:
        await container.close()

    if not movies:
        click.echo("No movies found")
        return

    for movie in movies:
        year = f" ({movie.year})" if movie.year else ""
        click.echo(f"{movie.external_id:>8}  {movie.title}{year}")


async def _run_movie_details(container: Container, movie_id: str) -> None:
    """Fetch a movie record and print it."""
    try:
        metadata_service = container.get(IMetadataService)  # type: ignore
        movie = await metadata_service.get_details(movie_id)
    finally:
        await container.close()

    click.echo(movie.display_title)
    click.echo("=" * 40)
    if movie.original_title and movie.original_title != movie.title:
        click.echo(f"Original Title: {movie.original_title}")
    if movie.rating is not None:
        click.echo(f"Rating: {movie.rating}")
    if movie.director:
        click.echo(f"Director: {movie.director}")
    if movie.cast:
        click.echo(f"Cast: {', '.join(movie.cast)}")
    if movie.genres:
        click.echo(f"Genres: {', '.join(movie.genres)}")
    if movie.runtime:
        click.echo(f"Runtime: {movie.runtime} min")
    if movie.plot:
        click.echo(f"Plot: {movie.plot}")


async def _run_search_subtitles(
    container: Container,
    tmdb_id: Optional[str],
    title: str,
    year: Optional[int],
    language: str,
) -> None:
    """Search subtitles and print them best first."""
    try:
        subtitle_resolver = container.get(ISubtitleResolver)  # type: ignore
        subtitles = await subtitle_resolver.search(
            external_id=tmdb_id, title=title, year=year, language=language
        )
    finally:
        await container.close()

    if not subtitles:
        click.echo("No subtitles found")
        return

    ranker = container.get(QualityRanker)
    _display_subtitles(ranker.sort_by_quality(subtitles))


async def _run_download(
    container: Container, file_id: int, file_name: str, output_dir: Optional[Path]
) -> Path:
    """Download a subtitle into the download directory."""
    try:
        download_manager = container.get(IDownloadManager)  # type: ignore
        return await download_manager.download_to_library(file_id, file_name, output_dir)
    finally:
        await container.close()


async def _run_translate(container: Container, path: Path, target: Optional[str]) -> Path:
    """Translate a subtitle file."""
    try:
        translation_fallback = container.get(ITranslationFallback)  # type: ignore
        return await translation_fallback.translate_file(path, target)
    finally:
        await container.close()


def _validate_prerequisites(config: Config) -> List[str]:
    """Collect configuration problems that would stop the pipeline.

    Args:
        config: Application configuration.

    Returns:
        List of validation errors (empty if all valid).
    """
    errors = []

    if not config.llm.api_key:
        errors.append("LLM API key not configured")
    if not config.tmdb.api_key:
        errors.append("TMDb API key not configured")
    if not config.opensubtitles.api_key:
        errors.append("OpenSubtitles API key not configured")
    if not config.opensubtitles.username or not config.opensubtitles.password:
        errors.append("OpenSubtitles username/password not configured")

    if config.watcher.watch_dir and not Path(config.watcher.watch_dir).is_dir():
        errors.append(f"Watch directory does not exist: {config.watcher.watch_dir}")

    return errors


def _display_subtitles(subtitles: List[SubtitleRecord]) -> None:
    """Display subtitle search results."""
    for subtitle in subtitles:
        flags = []
        if subtitle.hd:
            flags.append("HD")
        if subtitle.ai_translated:
            flags.append("AI")
        if subtitle.machine_translated:
            flags.append("MT")
        flag_text = f" [{', '.join(flags)}]" if flags else ""
        click.echo(
            f"{subtitle.id:>10}  [{subtitle.language}] {subtitle.file_name}{flag_text}  "
            f"downloads: {subtitle.download_count}  rating: {subtitle.rating}"
        )


def _display_result(result: PipelineResult) -> None:
    """Display pipeline result.

    Args:
        result: Pipeline result to display.
    """
    if result.status == PipelineStatus.SUCCESS:
        click.echo("✓ Status: SUCCESS")
        if result.movie:
            click.echo(f"  Movie: {result.movie.display_title}")
            click.echo(f"  TMDb ID: {result.movie.external_id}")
        if result.subtitle:
            click.echo(f"  Subtitle: {result.subtitle.file_name} [{result.subtitle.language}]")
        if result.subtitle_path:
            click.echo(f"  Saved to: {result.subtitle_path}")
        if result.translated_path:
            click.echo(f"  Translated: {result.translated_path}")
        if result.error_message:
            click.echo(f"  Warning: {result.error_message}")

    elif result.status == PipelineStatus.FAILED:
        click.echo("✗ Status: FAILED")
        if result.error_message:
            click.echo(f"  Error: {result.error_message}")

    else:
        click.echo(f"⊘ Status: {result.status.value.upper()}")
        if result.movie_file:
            click.echo(f"  Movie file: {result.movie_file.name}")
        if result.working_title:
            click.echo(f"  Working title: {result.working_title}")

    if result.processing_time_seconds is not None:
        click.echo(f"  Time: {result.processing_time_seconds:.1f}s")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
