"""Watch configuration files and trigger debounced reloads.

The watcher registers one ``watchdog`` watch per directory that holds a
tracked file, feeds filesystem events through a queue to a single
background loop and collapses bursts of changes into one reload: every
change cancels the pending reload timer and starts a new one, so the
callback runs once the files have been quiet for the reload delay.
"""

import logging
import os
import queue
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from .core.resources import find_resource, normalize_path

logger = logging.getLogger(__name__)

__all__ = ["FileWatcher", "DEFAULT_RELOAD_DELAY_MS"]

DEFAULT_RELOAD_DELAY_MS = 100

_CHANGE_EVENTS = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}
)

# Unblocks the watch loop on stop
_STOP = object()


class _QueueingEventHandler(FileSystemEventHandler):
    """Hands change events over to the watch loop."""

    def __init__(self, events: "queue.Queue[object]"):
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _CHANGE_EVENTS:
            self._events.put(event)


class FileWatcher:
    """Watches configuration files and calls back after changes settle.

    Tracked files are kept while the watcher is stopped, so files can be
    registered before :meth:`start` and a stopped watcher can be started
    again.

    Args:
        on_change: Called with a reason string once a burst of changes settles
        reload_delay_ms: Quiet period before the callback runs
        resource_dirs: Directories searched by :meth:`watch_resource`

    Example:
        >>> watcher = FileWatcher(on_change=lambda reason: print(reason))
        >>> watcher.watch_file("config/application.properties")
        >>> watcher.start()
        # editing the file prints "File change detected: /.../application.properties"
        >>> watcher.stop()
    """

    _instance: "FileWatcher | None" = None
    _instance_lock = threading.Lock()

    def __init__(
        self,
        on_change: Callable[[str], None] | None = None,
        reload_delay_ms: int = DEFAULT_RELOAD_DELAY_MS,
        resource_dirs: Iterable[str | Path] = ("config", "resources"),
    ):
        self._on_change = on_change
        self.reload_delay_ms = reload_delay_ms
        self._resource_dirs = tuple(resource_dirs)

        self._state_lock = threading.Lock()
        self._running = False
        self._events: "queue.Queue[object]" = queue.Queue()
        self._loop_thread: threading.Thread | None = None

        # Guards tracked files, directories and the observer handle
        self._watch_lock = threading.Lock()
        self._watched_files: set[Path] = set()
        self._watched_directories: set[Path] = set()
        self._observer: Observer | None = None
        self._handler: _QueueingEventHandler | None = None
        self._watches: dict[Path, ObservedWatch] = {}

        # Guards the pending reload
        self._reload_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending_reason: str | None = None
        self._generation = 0

    @classmethod
    def get_instance(cls) -> "FileWatcher":
        """Process-wide watcher used by the default provider."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and discard the process-wide watcher. Used by tests."""
        with cls._instance_lock:
            instance = cls._instance
            cls._instance = None
        if instance is not None:
            instance.stop()

    def set_reload_callback(self, on_change: Callable[[str], None] | None) -> None:
        self._on_change = on_change

    @property
    def reload_delay_ms(self) -> int:
        return self._reload_delay_ms

    @reload_delay_ms.setter
    def reload_delay_ms(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"reload_delay_ms must be >= 0, got: {value}")
        self._reload_delay_ms = value

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def watched_files(self) -> frozenset[Path]:
        with self._watch_lock:
            return frozenset(self._watched_files)

    @property
    def watched_directories(self) -> frozenset[Path]:
        with self._watch_lock:
            return frozenset(self._watched_directories)

    def start(self) -> None:
        """Start watching. Calling it on a running watcher does nothing."""
        with self._state_lock:
            if self._running:
                if self._loop_thread is not None and self._loop_thread.is_alive():
                    return
                # The watch loop ended on its own; replace the stale observer
                self._shutdown_locked(cancel_pending=False)

            events: "queue.Queue[object]" = queue.Queue()
            handler = _QueueingEventHandler(events)
            observer = Observer()
            observer.daemon = True
            observer.start()

            with self._watch_lock:
                self._observer = observer
                self._handler = handler
                for directory in sorted(self._watched_directories):
                    try:
                        self._schedule_directory(directory)
                    except OSError as e:
                        logger.error(f"Failed to watch directory {directory}: {e}")
                        self._drop_directory(directory)

            self._events = events
            self._loop_thread = threading.Thread(
                target=self._watch_loop, args=(events,), name="ConfigFileWatcher", daemon=True
            )
            self._running = True
            self._loop_thread.start()
            logger.info("Configuration file watcher started")

    def stop(self) -> None:
        """Stop watching and cancel any pending reload. Idempotent."""
        with self._state_lock:
            if not self._running:
                return
            self._shutdown_locked(cancel_pending=True)
            logger.info("Configuration file watcher stopped")

    def _shutdown_locked(self, cancel_pending: bool) -> None:
        # Caller holds _state_lock
        self._running = False

        with self._watch_lock:
            observer = self._observer
            self._observer = None
            self._watches.clear()

        if observer is not None:
            observer.stop()
            observer.join(timeout=2.0)

        self._events.put(_STOP)
        loop_thread = self._loop_thread
        self._loop_thread = None
        if loop_thread is not None and loop_thread is not threading.current_thread():
            loop_thread.join(timeout=2.0)

        if cancel_pending:
            self._cancel_scheduled_reload()

    def watch_file(self, path: str | Path) -> None:
        """Track a file. Its parent directory must exist; the file need not."""
        normalized = normalize_path(path)
        directory = normalized.parent

        with self._watch_lock:
            if normalized in self._watched_files:
                logger.debug(f"File already being watched: {normalized}")
                return

            if not directory.is_dir():
                logger.debug(
                    f"Directory for configuration file {normalized} does not exist: {directory}"
                )
                return

            if directory not in self._watched_directories:
                try:
                    self._schedule_directory(directory)
                except OSError as e:
                    logger.error(f"Failed to watch file {normalized}: {e}")
                    return
                self._watched_directories.add(directory)

            self._watched_files.add(normalized)

        if normalized.exists():
            logger.debug(f"Now watching configuration file: {normalized}")
        else:
            logger.debug(f"Watching for configuration file to appear: {normalized}")

    def unwatch_file(self, path: str | Path) -> None:
        """Stop tracking a file, releasing its directory once nothing else uses it."""
        normalized = normalize_path(path)
        with self._watch_lock:
            if normalized not in self._watched_files:
                return
            self._watched_files.discard(normalized)
            directory = normalized.parent
            if not any(f.parent == directory for f in self._watched_files):
                self._drop_directory(directory)
        logger.debug(f"Stopped watching configuration file: {normalized}")

    def replace_watched_files(self, paths: Iterable[str | Path]) -> None:
        """Track exactly ``paths``, dropping files no longer in the set."""
        wanted = [normalize_path(path) for path in paths]
        for stale in self.watched_files - set(wanted):
            self.unwatch_file(stale)
        for path in wanted:
            self.watch_file(path)

    def watch_resource(self, name: str, explicit_path: str | Path | None = None) -> None:
        """Track a resource by name, or by its already resolved path."""
        try:
            path = Path(explicit_path) if explicit_path is not None else find_resource(
                name, self._resource_dirs
            )
            if path is None:
                logger.debug(f"Cannot watch resource (not found): {name}")
                return
            self.watch_file(path)
        except (OSError, ValueError) as e:
            logger.debug(f"Cannot watch resource {name}: {e}")

    def schedule_reload(self, path: str | Path) -> None:
        """Schedule a reload for a changed file, replacing any pending one."""
        with self._reload_lock:
            if not self._running:
                logger.debug(f"File watcher not running, ignoring change to {path}")
                return

            self._pending_reason = f"File change detected: {path}"
            if self._timer is not None:
                self._timer.cancel()

            self._generation += 1
            timer = threading.Timer(
                self._reload_delay_ms / 1000.0, self._fire_reload, args=(self._generation,)
            )
            timer.name = "ConfigReloadScheduler"
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire_reload(self, generation: int) -> None:
        with self._reload_lock:
            # A newer schedule or a stop superseded this timer
            if generation != self._generation:
                return
            reason = self._pending_reason or "File change detected"
            self._pending_reason = None
            self._timer = None

        callback = self._on_change
        if callback is None:
            logger.debug(f"No reload callback registered, ignoring: {reason}")
            return

        try:
            callback(reason)
        except Exception as e:
            logger.error(f"Failed to reload configuration after file change: {e}")
            logger.debug("Configuration reload error details", exc_info=True)

    def _cancel_scheduled_reload(self) -> None:
        with self._reload_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending_reason = None
            self._generation += 1

    def _schedule_directory(self, directory: Path) -> None:
        # Caller holds _watch_lock. Only a running observer gets watches.
        if self._observer is None:
            return
        self._watches[directory] = self._observer.schedule(
            self._handler, str(directory), recursive=False
        )

    def _drop_directory(self, directory: Path) -> None:
        # Caller holds _watch_lock
        self._watched_directories.discard(directory)
        self._watched_files = {f for f in self._watched_files if f.parent != directory}
        watch = self._watches.pop(directory, None)
        if watch is not None and self._observer is not None:
            self._observer.unschedule(watch)

    def _watch_loop(self, events: "queue.Queue[object]") -> None:
        logger.debug("File watcher loop started")

        while True:
            item = events.get()
            if item is _STOP:
                break
            try:
                if self._is_watched_directory_removal(item):
                    logger.warning(
                        f"Watched directory {os.fsdecode(item.src_path)} is gone, stopping file watcher loop"
                    )
                    self._halt_after_loop_exit(events)
                    break
                for path in self._event_paths(item):
                    with self._watch_lock:
                        tracked = path in self._watched_files
                    if tracked:
                        logger.info(f"Configuration file changed: {path} - scheduling reload")
                        self.schedule_reload(path)
            except Exception as e:
                logger.error(f"Error in file watcher loop: {e}")
                logger.debug("File watcher error details", exc_info=True)

        logger.debug("File watcher loop ended")

    def _halt_after_loop_exit(self, events: "queue.Queue[object]") -> None:
        """Return to the stopped state once the loop gives up.

        A reload already scheduled still fires, and the provider's next
        reload re-targets and restarts the watcher. When another thread is
        inside start() or stop() it finishes the job instead.
        """
        if not self._state_lock.acquire(blocking=False):
            return
        try:
            if self._running and self._events is events:
                self._shutdown_locked(cancel_pending=False)
                logger.info("Configuration file watcher stopped")
        finally:
            self._state_lock.release()

    def _is_watched_directory_removal(self, event: FileSystemEvent) -> bool:
        if not event.is_directory or event.event_type != EVENT_TYPE_DELETED:
            return False
        removed = normalize_path(os.fsdecode(event.src_path))
        with self._watch_lock:
            return removed in self._watched_directories

    @staticmethod
    def _event_paths(event: FileSystemEvent) -> list[Path]:
        if event.is_directory:
            return []
        paths = [normalize_path(os.fsdecode(event.src_path))]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(normalize_path(os.fsdecode(dest_path)))
        return paths
