"""Decides when tx3 bindings are (re)generated."""
import dataclasses
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional
from tx3_build.core.errors import ConfigurationError
from tx3_build.core.logging import log_context
from tx3_build.core.workflow import BuildPhase
from tx3_build.generators.bindgen.invoker import build_request, run_bindgen
from tx3_build.generators.bindgen.options import spread_input_files
from tx3_build.generators.bindgen.types import GenerationConfig, GenerationRequest
from tx3_build.generators.bindgen.utils import find_artifacts

log = logging.getLogger(__name__)

Runner = Callable[[GenerationRequest], None]


class RegenerationGuard:
    """
    Serializes generator runs against one output directory.

    A caller that does not wait and finds a run in flight only queues its
    task as the pending follow-up; any number of such requests collapse into
    one extra run (the latest task) once the current one finishes. Completion
    callbacks fire after the last run of the batch, so a caller that was
    coalesced is notified only once its follow-up has finished.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._running = False
        self._pending: Optional[Callable[[], None]] = None
        self._callbacks: List[Callable[[], None]] = []

    @property
    def running(self) -> bool:
        with self._cond:
            return self._running

    def run(
        self,
        fn: Callable[[], None],
        wait: bool = True,
        on_complete: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Run fn under the guard. Returns False if the run was coalesced."""
        with self._cond:
            if self._running:
                if not wait:
                    self._pending = fn
                    if on_complete is not None:
                        self._callbacks.append(on_complete)
                    return False
                while self._running:
                    self._cond.wait()
            self._running = True
            if on_complete is not None:
                self._callbacks.append(on_complete)
        callbacks: List[Callable[[], None]] = []
        try:
            task = fn
            while True:
                task()
                with self._cond:
                    if self._pending is None:
                        callbacks, self._callbacks = self._callbacks, []
                        break
                    task, self._pending = self._pending, None
        finally:
            with self._cond:
                # A failed batch drops its follow-up and never notifies
                self._running = False
                self._pending = None
                self._callbacks = []
                self._cond.notify_all()
        for callback in callbacks:
            callback()
        return True


_guards: Dict[Path, RegenerationGuard] = {}
_guards_lock = threading.Lock()


def guard_for(output_dir: Path) -> RegenerationGuard:
    """Return the shared guard for an output directory."""
    key = Path(output_dir).absolute()
    with _guards_lock:
        guard = _guards.get(key)
        if guard is None:
            guard = _guards[key] = RegenerationGuard()
        return guard


class GenerationCoordinator:
    def __init__(self, config: GenerationConfig, runner: Runner = run_bindgen):
        self.config = config
        self.runner = runner
        self.guard = guard_for(config.output_dir)

    def _extra(self, phase: BuildPhase) -> dict:
        return log_context(phase, self.config.output_dir)

    def current_inputs(self) -> List[Path]:
        """Inputs matching the configured patterns right now."""
        if not self.config.patterns:
            return list(self.config.input_files)
        return spread_input_files(self.config.patterns, self.config.root)

    def _generate(self, phase: BuildPhase) -> None:
        inputs = self.current_inputs()
        if not inputs:
            log.error("No tx3 input files matched %s", list(self.config.patterns), extra=self._extra(phase))
            raise ConfigurationError(
                f"No tx3 input files matched the configured patterns: {list(self.config.patterns)}"
            )
        # Directory may have been removed since the config was sanitized
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        request = build_request(dataclasses.replace(self.config, input_files=tuple(inputs)))
        log.info("Generating TX3 bindings from %d file(s)", len(inputs), extra=self._extra(phase))
        self.runner(request)

    def ensure_generated(self, phase: BuildPhase = BuildPhase.BUILD_START) -> bool:
        """Always run the generator, waiting for any run already in flight."""
        return self.guard.run(lambda: self._generate(phase), wait=True)

    def list_artifacts(self) -> List[Path]:
        return find_artifacts(self.config.output_dir, self.config.target)

    def has_artifacts(self) -> bool:
        return bool(self.list_artifacts())

    def ensure_fresh(self) -> bool:
        """
        Generate only if the output directory holds no artifacts at all.

        Protects builds that skipped build start from shipping without
        bindings. It does not detect artifacts older than their sources.
        The check runs under the guard, after any in-flight run has finished.
        Returns True if the generator ran.
        """
        generated = []

        def check_then_generate() -> None:
            if self.has_artifacts():
                log.debug("Bindings present, skipping generation", extra=self._extra(BuildPhase.BUILD_END))
                return
            log.info("No bindings found, generating", extra=self._extra(BuildPhase.BUILD_END))
            self._generate(BuildPhase.BUILD_END)
            generated.append(True)

        self.guard.run(check_then_generate, wait=True)
        return bool(generated)

    def regenerate(self, on_complete: Optional[Callable[[], None]] = None) -> bool:
        """
        Regenerate bindings for a watch/HMR trigger.

        If a run is already in flight the request is folded into a single
        follow-up run and this returns False immediately. on_complete is
        called once the bindings reflect this trigger, on whichever thread
        finished the last run; it is not called if generation fails.
        """
        return self.guard.run(
            lambda: self._generate(BuildPhase.REGENERATE),
            wait=False,
            on_complete=on_complete,
        )
