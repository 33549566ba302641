"""Tests for the watchfiles-backed dev server used by `tx3-build watch`."""
from pathlib import Path
from tx3_build.plugins.dev_server import Tx3DevServerPlugin
from tx3_build.plugins.watch import WatchfilesDevServer, WatchfilesWatcher, watch_root


def test_watch_root_for_glob_pattern(project):
    assert watch_root(project / "protocol" / "**" / "*.tx3") == project / "protocol"


def test_watch_root_for_file(project):
    assert watch_root(project / "protocol" / "transfer.tx3") == project / "protocol"


def test_watch_root_for_directory(project):
    assert watch_root(project / "protocol") == project / "protocol"


def test_watcher_roots_are_deduplicated_and_existing(project):
    watcher = WatchfilesWatcher()
    watcher.add([
        str(project / "protocol" / "transfer.tx3"),
        str(project / "protocol" / "*.tx3"),
        str(project / "missing" / "*.tx3"),
    ])
    assert watcher.roots() == [project / "protocol"]


def test_watcher_emit_and_off():
    watcher = WatchfilesWatcher()
    seen = []
    watcher.on("change", seen.append)
    watcher.emit("change", "/a.tx3")
    watcher.off("change", seen.append)
    watcher.emit("change", "/b.tx3")
    assert seen == ["/a.tx3"]


def test_dev_server_session_on_watchfiles_server(project, fake_bindgen):
    plugin = Tx3DevServerPlugin({"input_files": ["protocol/*.tx3"]}, root=project, runner=fake_bindgen)
    server = WatchfilesDevServer()
    with plugin.configure_server(server, threaded=False):
        assert project / "protocol" / "transfer.tx3" in server.watcher.paths
        server.watcher.emit("change", str(project / "protocol" / "transfer.tx3"))

    assert fake_bindgen.calls == 1
    assert server.ws.reloads == 1
