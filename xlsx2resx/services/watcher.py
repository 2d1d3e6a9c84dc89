from __future__ import annotations

import logging
import queue
import signal
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .forward import is_workbook_path

"""Watch mode: re-run the forward conversion when a workbook changes.

A background observer thread polls the watched path (one workbook or a
directory, non-recursive) and puts WatchEvent objects on a queue. The calling
thread is the single worker: it takes one event at a time and runs the
conversion synchronously, so two conversions never overlap.

Signals: SIGINT / SIGTERM / SIGQUIT stop the loop, SIGHUP is ignored.
"""

__all__ = [
    "WatchEvent",
    "Snapshot",
    "take_snapshot",
    "diff_snapshots",
    "XlsxWatcher",
]

logger = logging.getLogger(__name__)

EVENT_CREATE = "create"
EVENT_WRITE = "write"
EVENT_RENAME = "rename"

STOP_SIGNALS = ("SIGINT", "SIGTERM", "SIGQUIT")
IGNORED_SIGNALS = ("SIGHUP",)

# path -> (mtime_ns, size)
Snapshot = dict[Path, tuple[int, int]]


@dataclass(frozen=True)
class WatchEvent:
    path: Path
    kind: str  # create | write | rename


def take_snapshot(target: Path) -> Snapshot:
    """Modification state of every watched workbook under ``target``."""
    if target.is_dir():
        candidates = [p for p in target.iterdir() if p.is_file()]
    elif target.exists():
        candidates = [target]
    else:
        candidates = []

    snapshot: Snapshot = {}
    for path in candidates:
        if not is_workbook_path(path):
            continue
        try:
            st = path.stat()
        except OSError:
            # 走査中に削除された
            continue
        snapshot[path] = (st.st_mtime_ns, st.st_size)
    return snapshot


def diff_snapshots(before: Snapshot, after: Snapshot) -> list[WatchEvent]:
    """Events between two snapshots, sorted by path.

    New paths are ``create``, or ``rename`` when another path disappeared in
    the same interval; changed paths are ``write``. Removals produce nothing.
    """
    removed = [p for p in before if p not in after]
    events: list[WatchEvent] = []
    for path in sorted(after):
        if path not in before:
            kind = EVENT_RENAME if removed else EVENT_CREATE
            events.append(WatchEvent(path, kind))
        elif before[path] != after[path]:
            events.append(WatchEvent(path, EVENT_WRITE))
    return events


class XlsxWatcher:
    """Polling watcher that feeds workbook change events to a single worker."""

    def __init__(
        self,
        target: Path,
        on_change: Callable[[Path], object],
        *,
        poll_interval: float = 1.0,
    ) -> None:
        self.target = target
        self.on_change = on_change
        self.poll_interval = poll_interval
        self.events: queue.Queue[WatchEvent] = queue.Queue()
        self.stop_event = threading.Event()
        self._observer: threading.Thread | None = None
        self._previous_handlers: dict[int, object] = {}

    # --- observer side -------------------------------------------------
    def _observe(self) -> None:
        previous = take_snapshot(self.target)
        while not self.stop_event.wait(self.poll_interval):
            try:
                current = take_snapshot(self.target)
            except OSError as e:
                logger.error("error: %s", e)
                continue
            for event in diff_snapshots(previous, current):
                logger.debug("event: %s %s", event.kind, event.path)
                self.events.put(event)
            previous = current

    def start(self) -> None:
        self._observer = threading.Thread(
            target=self._observe, name="xlsx2resx-observer", daemon=True
        )
        self._observer.start()

    # --- signal handling -----------------------------------------------
    def _handle_signal(self, signum: int, frame: object) -> None:
        name = signal.Signals(signum).name
        if name in IGNORED_SIGNALS:
            logger.debug("%s received, ignoring", name)
            return
        logger.debug("got %s ...", name)
        self.stop_event.set()

    def install_signal_handlers(self) -> None:
        # signal.signal はメインスレッドからのみ呼べる
        if threading.current_thread() is not threading.main_thread():
            return
        for name in STOP_SIGNALS + IGNORED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            self._previous_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._previous_handlers.clear()

    # --- worker side ---------------------------------------------------
    def process_event(self, event: WatchEvent) -> None:
        logger.info("modified or created file: %s", event.path)
        try:
            self.on_change(event.path)
        except Exception as e:
            # watch モードでは 1 件の失敗で停止しない
            logger.error("conversion failed for %s: %s", event.path, e)

    def run(self) -> None:
        """Block until a stop signal, converting workbooks as they change."""
        self.install_signal_handlers()
        self.start()
        logger.info("watching %s for changes", self.target)
        try:
            while not self.stop_event.is_set():
                try:
                    event = self.events.get(timeout=self.poll_interval)
                except queue.Empty:
                    continue
                self.process_event(event)
        finally:
            self.stop_event.set()
            if self._observer is not None:
                self._observer.join(timeout=self.poll_interval * 2)
            self.restore_signal_handlers()
            logger.info("Shutting down...")

    def stop(self) -> None:
        self.stop_event.set()
