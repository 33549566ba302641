"""Standalone dev server backed by watchfiles, used by `tx3-build watch`."""
from __future__ import annotations
import logging
import threading
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from watchfiles import Change, watch
from tx3_build.generators.bindgen.utils import has_magic

log = logging.getLogger(__name__)


def watch_root(path: Path) -> Path:
    """Longest leading part of path without glob characters, or the file's directory."""
    parts = []
    for part in path.parts:
        if has_magic(part):
            break
        parts.append(part)
    base = Path(*parts) if parts else Path.cwd()
    if base == path and not path.is_dir():
        return path.parent
    return base


class WatchfilesWatcher:
    def __init__(self) -> None:
        self.paths: List[Path] = []
        self._listeners: Dict[str, List[Callable[[str], None]]] = defaultdict(list)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def add(self, paths: List[str]) -> None:
        for p in paths:
            path = Path(p)
            if path not in self.paths:
                self.paths.append(path)

    def on(self, event: str, callback: Callable[[str], None]) -> WatchfilesWatcher:
        self._listeners[event].append(callback)
        return self

    def off(self, event: str, callback: Callable[[str], None]) -> None:
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def emit(self, event: str, path: str) -> None:
        for callback in list(self._listeners[event]):
            callback(path)

    def roots(self) -> List[Path]:
        roots: List[Path] = []
        for path in self.paths:
            root = watch_root(path)
            if root.exists() and root not in roots:
                roots.append(root)
        return roots

    def run(self) -> None:
        roots = self.roots()
        if not roots:
            log.warning("Nothing to watch")
            return
        log.info("Watching %s", ", ".join(str(r) for r in roots))
        for changes in watch(*roots, stop_event=self._stop):
            for change, path in sorted(changes, key=lambda c: c[1]):
                if change in (Change.added, Change.modified):
                    self.emit("change", path)

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="tx3-watch", daemon=True)
        self._thread.start()
        return self._thread

    def close(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


class NullModuleGraph:
    """No in-memory module graph outside a bundler."""
    def invalidate_all(self) -> None:
        log.debug("Module graph invalidated")


class LoggingReloadChannel:
    def __init__(self) -> None:
        self.reloads = 0

    def send(self, payload: Dict[str, Any]) -> None:
        self.reloads += 1
        log.info("Reload broadcast: %s", payload.get("type"))


class WatchfilesDevServer:
    def __init__(self) -> None:
        self.watcher = WatchfilesWatcher()
        self.module_graph = NullModuleGraph()
        self.ws = LoggingReloadChannel()
