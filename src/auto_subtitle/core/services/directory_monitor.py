"""Directory monitor service with write-stability checking and deferred processing."""

import asyncio
import os
from pathlib import Path
from typing import Any, Optional, Set

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import MonitorError, get_file_size, relative_depth
from ..interfaces import ICandidateSelector, IDirectoryMonitor, IDirectoryPipeline
from ..models import MonitorStatus, WatchEvent, WatchEventKind


class WatchEventHandler(FileSystemEventHandler):
    """Forwards creation events from the observer thread into the event loop."""

    def __init__(self, monitor: "DirectoryMonitor", loop: asyncio.AbstractEventLoop):
        super().__init__()
        self.monitor = monitor
        self.loop = loop

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event.src_path, event.is_directory)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Files moved into the tree count as new
        self._forward(event.dest_path, event.is_directory)

    def _forward(self, raw_path: Any, is_directory: bool) -> None:
        kind = WatchEventKind.DIRECTORY if is_directory else WatchEventKind.FILE
        watch_event = WatchEvent(path=Path(os.fsdecode(raw_path)), kind=kind)
        self.loop.call_soon_threadsafe(self.monitor.handle_event, watch_event)


class DirectoryMonitor(IDirectoryMonitor, LoggerMixin):
    """Watches a directory tree and hands new movie directories to the pipeline.

    Lifecycle:
        start() → observing, initial scan → ready
        stop()  → observer stopped, pending directory tasks cancelled

    Events seen before the initial scan completes are dropped, so movies
    already present at startup are never processed.
    """

    def __init__(
        self,
        config: Config,
        pipeline: IDirectoryPipeline,
        candidate_selector: ICandidateSelector,
    ):
        """Initialize directory monitor.

        Args:
            config: Application configuration.
            pipeline: Pipeline run for changed directories.
            candidate_selector: Used to recognise video files.
        """
        self._config = config
        self._watcher_config = config.watcher
        self._pipeline = pipeline
        self._candidate_selector = candidate_selector

        self._observer: Optional[Any] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._watch_dir: Optional[Path] = None
        self._is_watching = False
        self._is_initialized = False
        self._tasks: Set["asyncio.Task[None]"] = set()

    async def start(self) -> None:
        """Start watching.

        Raises:
            MonitorError: If the watch directory is missing.
        """
        if self._is_watching:
            self.logger.warning("Directory monitor is already running")
            return

        if not self._watcher_config.watch_dir:
            raise MonitorError("Watch directory is not configured")

        watch_dir = Path(self._watcher_config.watch_dir)
        if not watch_dir.is_dir():
            raise MonitorError(f"Watch directory does not exist: {watch_dir}")

        self._watch_dir = watch_dir
        self._loop = asyncio.get_running_loop()
        self._is_initialized = False

        self.logger.info(f"Starting to watch: {watch_dir}")
        observer = Observer()
        observer.schedule(
            WatchEventHandler(self, self._loop),
            str(watch_dir),
            recursive=self._watcher_config.scan_depth > 0,
        )
        observer.start()
        self._observer = observer
        self._is_watching = True

        entry_count = await self._loop.run_in_executor(None, self._initial_scan)
        self._is_initialized = True
        self.logger.info(f"Initial scan complete ({entry_count} entries), watching for changes")

    async def stop(self, cancel_pending: bool = True) -> None:
        """Stop watching.

        Args:
            cancel_pending: Cancel deferred directory tasks that have not run yet.
        """
        if self._observer is not None:
            observer = self._observer
            self._observer = None
            observer.stop()
            await asyncio.get_running_loop().run_in_executor(None, observer.join)
            self.logger.info("Directory monitor stopped")

        self._is_watching = False
        self._is_initialized = False

        if cancel_pending and self._tasks:
            tasks = list(self._tasks)
            self.logger.info(f"Cancelling {len(tasks)} pending directory tasks")
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    def get_status(self) -> MonitorStatus:
        """Get monitor state."""
        return MonitorStatus(
            is_watching=self._is_watching,
            is_initialized=self._is_initialized,
            watch_dir=self._watch_dir,
            processed_files_count=self._pipeline.processed_files_count,
            pending_tasks=len(self._tasks),
        )

    def handle_event(self, event: WatchEvent) -> None:
        """Handle a creation event on the event loop.

        Args:
            event: Creation event.
        """
        try:
            if self._is_filtered(event.path):
                return
            if event.kind == WatchEventKind.FILE:
                self._handle_new_file(event.path)
            else:
                self._handle_new_directory(event.path)
        except Exception as e:
            self.logger.error(f"Error handling event for {event.path}: {e}")

    def _handle_new_file(self, path: Path) -> None:
        if not self._candidate_selector.is_video_file(path):
            return
        if not self._is_initialized:
            return
        if not self._pipeline.register_file(path):
            self.logger.debug(f"File already handed off: {path}")
            return

        self.logger.info(f"New video file detected: {path}")
        self._schedule(path.parent, wait_for=path)

    def _handle_new_directory(self, path: Path) -> None:
        if path == self._watch_dir:
            return
        if not self._is_initialized:
            self.logger.debug(f"Ignoring directory seen during initial scan: {path}")
            return

        self.logger.info(f"New directory detected: {path}")
        self._schedule(path, wait_for=None)

    def _is_filtered(self, path: Path) -> bool:
        """Check if a path lies outside the watched depth or is hidden."""
        if self._watch_dir is None:
            return True
        depth = relative_depth(path, self._watch_dir)
        if depth < 0 or depth > self._watcher_config.scan_depth:
            return True
        if self._watcher_config.ignore_hidden:
            relative = path.relative_to(self._watch_dir)
            return any(part.startswith(".") for part in relative.parts)
        return False

    def _schedule(self, directory: Path, wait_for: Optional[Path]) -> None:
        """Schedule a deferred pipeline run for a directory."""
        if self._loop is None:
            return
        task = self._loop.create_task(self._deferred_process(directory, wait_for))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deferred_process(self, directory: Path, wait_for: Optional[Path]) -> None:
        try:
            if wait_for is not None and not await self._await_write_finish(wait_for):
                self.logger.info(f"File disappeared before it finished writing: {wait_for}")
                return

            await asyncio.sleep(self._watcher_config.processing_delay_ms / 1000)
            result = await self._pipeline.process_directory(directory)
            self.logger.info(f"Finished {directory}: {result.status.value}")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to process directory {directory}: {e}")

    async def _await_write_finish(self, path: Path) -> bool:
        """Wait until a file's size has stopped changing.

        Args:
            path: File being written.

        Returns:
            True once the size has been stable for the stability threshold,
            False if the file disappeared.
        """
        loop = asyncio.get_running_loop()
        threshold = self._watcher_config.stability_threshold_ms / 1000
        interval = self._watcher_config.poll_interval_ms / 1000

        last_size: Optional[int] = None
        stable_since = loop.time()
        while True:
            try:
                size = get_file_size(path)
            except OSError:
                return False

            now = loop.time()
            if size != last_size:
                last_size = size
                stable_since = now
            elif now - stable_since >= threshold:
                return True
            await asyncio.sleep(interval)

    def _initial_scan(self) -> int:
        """Enumerate existing entries down to the scan depth."""
        if self._watch_dir is None:
            return 0

        count = 0
        for dirpath, dirnames, filenames in os.walk(self._watch_dir):
            depth = relative_depth(Path(dirpath), self._watch_dir)
            count += len(dirnames) + len(filenames)
            if depth + 1 >= self._watcher_config.scan_depth:
                dirnames[:] = []
        return count
