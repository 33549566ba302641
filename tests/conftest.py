"""Shared fixtures: a throwaway project tree, a fake generator and a fake dev server."""
import shutil
from pathlib import Path
from typing import Dict, List
import pytest
from tx3_build.generators.bindgen.types import GenerationRequest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project root containing protocol/transfer.tx3 and protocol/nested/faucet.tx3."""
    shutil.copytree(FIXTURES_DIR / "protocol", tmp_path / "protocol")
    return tmp_path


class FakeBindgen:
    """Stands in for tx3-bindgen: records each request and writes one artifact."""

    def __init__(self, extension: str = "ts", write: bool = True):
        self.requests: List[GenerationRequest] = []
        self.extension = extension
        self.write = write

    def __call__(self, request: GenerationRequest) -> None:
        self.requests.append(request)
        if self.write:
            args = list(request.args)
            out_dir = Path(args[args.index("-o") + 1])
            (out_dir / f"protocol.{self.extension}").write_text("// generated\n", encoding="utf-8")

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def fake_bindgen() -> FakeBindgen:
    return FakeBindgen()


class FakeWatcher:
    def __init__(self):
        self.added: List[str] = []
        self.listeners: Dict[str, list] = {}

    def add(self, paths):
        self.added.extend(paths)

    def on(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)
        return self

    def off(self, event, callback):
        self.listeners.get(event, []).remove(callback)

    def emit(self, event, path):
        for callback in list(self.listeners.get(event, [])):
            callback(path)


class FakeModuleGraph:
    def __init__(self):
        self.invalidations = 0

    def invalidate_all(self):
        self.invalidations += 1


class FakeReloadChannel:
    def __init__(self):
        self.messages: List[dict] = []

    def send(self, payload):
        self.messages.append(payload)


class FakeDevServer:
    def __init__(self):
        self.watcher = FakeWatcher()
        self.module_graph = FakeModuleGraph()
        self.ws = FakeReloadChannel()


@pytest.fixture
def dev_server() -> FakeDevServer:
    return FakeDevServer()
