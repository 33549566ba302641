"""Dev-server plugin: alias config, input watching and reload on change."""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional
from tx3_build.core.config import settings as default_settings
from tx3_build.core.logging import log_context
from tx3_build.core.workflow import BuildPhase
from tx3_build.generators.bindgen.utils import is_watched
from tx3_build.plugins.base import AliasEntry, DevServer, normalize_aliases
from tx3_build.plugins.build import Tx3BuildPlugin
from tx3_build.plugins.events import ChangeEvent, EventChannel, Subscription

log = logging.getLogger(__name__)

FULL_RELOAD = {"type": "full-reload"}


class DevServerSession:
    """
    Wiring between one dev server and one plugin.

    Owns the change subscription; close() releases it so repeated server
    restarts do not stack listeners.
    """

    def __init__(
        self,
        plugin: Tx3DevServerPlugin,
        server: DevServer,
        watched: List[Path],
        channel: EventChannel,
        threaded: bool = True,
    ):
        self.plugin = plugin
        self.server = server
        self.watched = watched
        self.channel = channel
        self.threaded = threaded
        self._subscription: Optional[Subscription] = channel.subscribe(self.handle_change)
        self._listener: Callable[[str], None] = self._on_watcher_change
        server.watcher.add([str(p) for p in watched])
        server.watcher.on("change", self._listener)
        if threaded:
            channel.start()

    @property
    def active(self) -> bool:
        return self._subscription is not None

    def _on_watcher_change(self, changed_file: str) -> None:
        if self._subscription is None:
            return
        event = ChangeEvent(Path(self.plugin.config.root, changed_file).absolute())
        if self.threaded:
            self.channel.publish(event)
        else:
            self.channel.dispatch(event)

    def handle_change(self, event: ChangeEvent) -> bool:
        """Regenerate and reload if the changed path is watched. Returns True if it was."""
        if not is_watched(event.path, self.watched):
            return False
        log.info(
            "TX3 file changed, regenerating bindings: %s", event.path,
            extra=log_context(BuildPhase.WATCH, self.plugin.config.output_dir),
        )
        # reload fires once this change is in the bindings, even if it was
        # folded into a run already in flight
        if not self.plugin.regenerate_bindings(on_complete=self.reload):
            log.debug("Regeneration queued behind a run in flight", extra=log_context(BuildPhase.WATCH))
        return True

    def reload(self) -> None:
        # Bindings are regenerated wholesale, so every consumer is invalidated
        self.server.module_graph.invalidate_all()
        self.server.ws.send(dict(FULL_RELOAD))

    def close(self) -> None:
        if self._subscription is None:
            return
        off = getattr(self.server.watcher, "off", None)
        if off is not None:
            off("change", self._listener)
        if self.threaded:
            # Events already queued are still handled before the loop exits
            self.channel.stop()
        self._subscription.unsubscribe()
        self._subscription = None

    def __enter__(self) -> DevServerSession:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class Tx3DevServerPlugin(Tx3BuildPlugin):
    name = "tx3-dev-server"

    def __init__(self, options, root=None, settings=None, alias: Optional[str] = None, **kwargs):
        super().__init__(options, root=root, settings=settings, **kwargs)
        self.alias = alias or (settings or default_settings).alias

    def alias_entry(self) -> AliasEntry:
        return AliasEntry(self.alias, str(self.config.output_dir))

    def config_hook(self, user_config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Return a resolve.alias config with the bindings alias appended.

        Existing aliases are kept in order. If the caller already maps the
        same namespace, the caller's mapping wins.
        """
        existing = normalize_aliases(((user_config or {}).get("resolve") or {}).get("alias"))
        aliases = list(existing)
        if not any(entry.match == self.alias for entry in existing):
            aliases.append(self.alias_entry())
        return {"resolve": {"alias": aliases}}

    def watch_paths(self) -> List[Path]:
        """Resolved input files plus the absolute input patterns, deduplicated."""
        paths: List[Path] = []
        for path in [*self.files_to_watch(), *(Path(self.config.root, p).absolute() for p in self.config.patterns)]:
            if path not in paths:
                paths.append(path)
        return paths

    def configure_server(
        self,
        server: DevServer,
        channel: Optional[EventChannel] = None,
        threaded: bool = True,
    ) -> DevServerSession:
        return DevServerSession(
            self,
            server,
            self.watch_paths(),
            channel or EventChannel(),
            threaded=threaded,
        )
