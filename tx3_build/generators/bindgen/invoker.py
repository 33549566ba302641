"""Command construction and execution for tx3-bindgen."""
import logging
import subprocess
from typing import List
from tx3_build.core.errors import GenerationError
from tx3_build.generators.bindgen.types import GenerationConfig, GenerationRequest

log = logging.getLogger(__name__)


def build_request(config: GenerationConfig) -> GenerationRequest:
    """
    Build the generator command line for a config.

    Flag order is fixed: inputs, output, target, endpoint, headers, env args,
    then user extras last so they can override earlier flags.
    """
    args: List[str] = []
    for input_file in config.input_files:
        args.extend(["-i", str(input_file)])
    args.extend(["-o", str(config.output_dir)])
    args.extend(["-t", config.target])
    args.extend(["--trp-endpoint", config.trp_endpoint])
    for key, value in config.trp_headers.items():
        args.extend(["--trp-header", f"{key}={value}"])
    for key, value in config.env_args.items():
        args.extend(["--env-arg", f"{key}={value}"])
    args.extend(config.bindgen_args)
    return GenerationRequest(executable=config.bindgen_path, args=tuple(args))


def run_bindgen(request: GenerationRequest) -> None:
    """
    Run the generator and block until it exits.

    stdout/stderr are inherited so generator diagnostics show up in the
    build tool's own output.
    """
    log.info("Running %s", request)
    try:
        subprocess.run(request.argv, check=True)
    except FileNotFoundError as e:
        log.error("Generator executable not found: %s", request.executable)
        raise GenerationError(
            f"Failed to generate TX3 bindings: executable not found: {request.executable}",
            command=request.argv,
        ) from e
    except subprocess.CalledProcessError as e:
        log.error("Failed to generate TX3 bindings (exit %d): %s", e.returncode, request)
        raise GenerationError(
            f"Failed to generate TX3 bindings: {request.executable} exited with status {e.returncode}",
            command=request.argv,
            returncode=e.returncode,
        ) from e
