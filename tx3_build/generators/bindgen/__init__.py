from tx3_build.generators.bindgen.coordinator import GenerationCoordinator
from tx3_build.generators.bindgen.invoker import build_request, run_bindgen
from tx3_build.generators.bindgen.options import sanitize_options

__all__ = ["GenerationCoordinator", "build_request", "run_bindgen", "sanitize_options"]
