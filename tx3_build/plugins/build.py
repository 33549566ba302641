"""Build-lifecycle plugin: generate bindings at build start, check them at build end."""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from tx3_build.core.config import Settings
from tx3_build.generators.bindgen.coordinator import GenerationCoordinator, Runner
from tx3_build.generators.bindgen.invoker import run_bindgen
from tx3_build.generators.bindgen.options import sanitize_options, spread_input_files
from tx3_build.generators.bindgen.types import GenerationConfig, Tx3PluginOptions
from tx3_build.plugins.base import BuildPlugin

log = logging.getLogger(__name__)


class Tx3BuildPlugin(BuildPlugin):
    name = "tx3-build"

    def __init__(
        self,
        options: Union[Tx3PluginOptions, Dict[str, Any]],
        root: Optional[Path] = None,
        settings: Optional[Settings] = None,
        runner: Runner = run_bindgen,
    ):
        self.config: GenerationConfig = sanitize_options(options, root=root, settings=settings)
        self.coordinator = GenerationCoordinator(self.config, runner=runner)

    def build_start(self) -> None:
        self.coordinator.ensure_generated()

    def build_end(self) -> None:
        # Builds that skipped build_start still need bindings
        self.coordinator.ensure_fresh()

    def regenerate_bindings(self, on_complete: Optional[Callable[[], None]] = None) -> bool:
        return self.coordinator.regenerate(on_complete=on_complete)

    def files_to_watch(self) -> List[Path]:
        return spread_input_files(self.config.patterns, self.config.root)
