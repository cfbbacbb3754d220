"""Test directory monitor service."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from auto_subtitle.core.interfaces import IDirectoryPipeline
from auto_subtitle.core.models import PipelineResult, PipelineStatus, WatchEvent, WatchEventKind
from auto_subtitle.core.services import CandidateSelector, DirectoryMonitor
from auto_subtitle.utils import MonitorError


@pytest.fixture
def mock_pipeline():
    """Pipeline mock with a real insert-once registry."""
    registered = set()

    def register_file(path):
        if path in registered:
            return False
        registered.add(path)
        return True

    pipeline = Mock(spec=IDirectoryPipeline)
    pipeline.register_file = Mock(side_effect=register_file)
    pipeline.processed_files_count = 0
    pipeline.process_directory = AsyncMock(
        side_effect=lambda directory: PipelineResult(
            directory=directory, status=PipelineStatus.SUCCESS
        )
    )
    return pipeline


@pytest.fixture
def monitor(config, mock_pipeline):
    """Directory monitor around the mock pipeline."""
    return DirectoryMonitor(config, mock_pipeline, CandidateSelector(config))


async def drain(monitor):
    """Wait for all deferred directory tasks to finish."""
    while monitor._tasks:
        await asyncio.gather(*list(monitor._tasks), return_exceptions=True)


def file_event(path):
    return WatchEvent(path=path, kind=WatchEventKind.FILE)


def dir_event(path):
    return WatchEvent(path=path, kind=WatchEventKind.DIRECTORY)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_requires_existing_directory(config, monitor, tmp_path):
    """Test that a missing watch directory is rejected."""
    config.watcher.watch_dir = str(tmp_path / "missing")

    with pytest.raises(MonitorError):
        await monitor.start()

    assert not monitor.get_status().is_watching


@pytest.mark.unit
@pytest.mark.asyncio
async def test_start_and_stop_status(monitor, watch_dir):
    """Test status transitions across start and stop."""
    await monitor.start()
    try:
        status = monitor.get_status()
        assert status.is_watching
        assert status.is_initialized
        assert status.watch_dir == watch_dir
    finally:
        await monitor.stop()

    status = monitor.get_status()
    assert not status.is_watching
    assert not status.is_initialized


@pytest.mark.unit
@pytest.mark.asyncio
async def test_new_video_file_processes_parent(monitor, mock_pipeline, watch_dir, make_file):
    """Test that a new video file schedules its directory."""
    movie_file = make_file(watch_dir / "Movie" / "Movie.mkv")
    await monitor.start()
    try:
        monitor.handle_event(file_event(movie_file))
        await drain(monitor)
    finally:
        await monitor.stop()

    mock_pipeline.process_directory.assert_awaited_once_with(watch_dir / "Movie")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicate_file_event_ignored(monitor, mock_pipeline, watch_dir, make_file):
    """Test that a file is handed off only once."""
    movie_file = make_file(watch_dir / "Movie" / "Movie.mkv")
    await monitor.start()
    try:
        monitor.handle_event(file_event(movie_file))
        monitor.handle_event(file_event(movie_file))
        await drain(monitor)
    finally:
        await monitor.stop()

    assert mock_pipeline.process_directory.await_count == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ignored_events(monitor, mock_pipeline, watch_dir, make_file):
    """Test events the monitor must not act on."""
    non_video = make_file(watch_dir / "Movie" / "Movie.nfo")
    hidden = make_file(watch_dir / ".incomplete" / "Movie.mkv")
    too_deep = make_file(watch_dir / "a" / "b" / "Movie.mkv")
    await monitor.start()
    try:
        monitor.handle_event(dir_event(watch_dir))
        monitor.handle_event(file_event(non_video))
        monitor.handle_event(file_event(hidden))
        monitor.handle_event(file_event(too_deep))
        assert monitor.get_status().pending_tasks == 0
    finally:
        await monitor.stop()

    mock_pipeline.register_file.assert_not_called()
    mock_pipeline.process_directory.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_events_before_ready_ignored(monitor, mock_pipeline, watch_dir, make_file):
    """Test that events arriving during the initial scan are dropped."""
    movie_file = make_file(watch_dir / "Movie" / "Movie.mkv")
    await monitor.start()
    try:
        monitor._is_initialized = False
        monitor.handle_event(file_event(movie_file))
        monitor.handle_event(dir_event(watch_dir / "Movie"))
        assert monitor.get_status().pending_tasks == 0
    finally:
        await monitor.stop()

    mock_pipeline.register_file.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_new_directory_processed(monitor, mock_pipeline, watch_dir):
    """Test that a new directory is scheduled for processing."""
    movie_dir = watch_dir / "New Movie"
    movie_dir.mkdir()
    await monitor.start()
    try:
        monitor.handle_event(dir_event(movie_dir))
        await drain(monitor)
    finally:
        await monitor.stop()

    mock_pipeline.process_directory.assert_awaited_once_with(movie_dir)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_vanished_file_not_processed(monitor, mock_pipeline, watch_dir):
    """Test that a file removed before it finished writing is skipped."""
    await monitor.start()
    try:
        monitor.handle_event(file_event(watch_dir / "Movie" / "gone.mkv"))
        await drain(monitor)
    finally:
        await monitor.stop()

    mock_pipeline.process_directory.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_pipeline_error_keeps_watching(monitor, mock_pipeline, watch_dir, make_file):
    """Test that a failing directory task does not stop the monitor."""
    mock_pipeline.process_directory.side_effect = RuntimeError("boom")
    movie_file = make_file(watch_dir / "Movie" / "Movie.mkv")
    await monitor.start()
    try:
        monitor.handle_event(file_event(movie_file))
        await drain(monitor)
        assert monitor.get_status().is_watching
    finally:
        await monitor.stop()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_stop_cancels_pending_tasks(config, monitor, mock_pipeline, watch_dir):
    """Test that stop cancels directory tasks still waiting to run."""
    config.watcher.processing_delay_ms = 60_000
    movie_dir = watch_dir / "Movie"
    movie_dir.mkdir()
    await monitor.start()

    monitor.handle_event(dir_event(movie_dir))
    await asyncio.sleep(0)
    assert monitor.get_status().pending_tasks == 1

    await monitor.stop()

    assert monitor.get_status().pending_tasks == 0
    mock_pipeline.process_directory.assert_not_awaited()
