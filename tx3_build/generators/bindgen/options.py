"""Option sanitizing, input resolution and output directory setup."""
import glob
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union
from tx3_build.core.config import Settings, settings as default_settings
from tx3_build.generators.bindgen.types import GenerationConfig, Tx3PluginOptions

log = logging.getLogger(__name__)


def spread_input_files(patterns: Sequence[str], root: Path) -> List[Path]:
    """
    Expand input patterns into absolute file paths.

    Each pattern is made absolute against root and then glob-expanded.
    A pattern that matches nothing contributes nothing. Results keep
    pattern order and drop duplicates.

    Args:
        patterns: Literal paths or glob patterns (``**`` is recursive)
        root: Directory relative patterns are resolved against

    Returns:
        Ordered, deduplicated list of absolute paths
    """
    files: List[Path] = []
    seen = set()
    for pattern in patterns:
        absolute = Path(root, pattern).absolute()
        for match in sorted(glob.glob(str(absolute), recursive=True)):
            path = Path(match)
            if path in seen:
                continue
            seen.add(path)
            files.append(path)
    return files


def ensure_output_dir(output_dir: Union[str, Path], root: Path) -> Path:
    """Resolve output_dir against root and create it with any missing parents."""
    output_path = Path(root, output_dir).absolute()
    output_path.mkdir(parents=True, exist_ok=True)
    return output_path


def sanitize_options(
    options: Union[Tx3PluginOptions, Dict[str, Any]],
    root: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> GenerationConfig:
    """
    Fill in defaults for every unset option.

    Unreachable executables or endpoints are not detected here; they fail
    when the generator runs.
    """
    if not isinstance(options, Tx3PluginOptions):
        options = Tx3PluginOptions.model_validate(options)
    settings = settings or default_settings
    root = Path(root or Path.cwd()).absolute()

    output_dir = ensure_output_dir(options.output_dir or settings.output_dir, root)
    input_files = spread_input_files(options.input_files, root)
    log.debug(
        "Resolved %d input file(s) from %d pattern(s)",
        len(input_files), len(options.input_files),
        extra={"output_dir": str(output_dir)},
    )

    return GenerationConfig(
        bindgen_path=options.bindgen_path or settings.bindgen_path,
        input_files=tuple(input_files),
        output_dir=output_dir,
        bindgen_args=tuple(options.bindgen_args or []),
        trp_endpoint=options.trp_endpoint or settings.trp_endpoint,
        trp_headers=dict(options.trp_headers or {}),
        env_args=dict(options.env_args or {}),
        target=options.target or settings.target,
        root=root,
        patterns=tuple(options.input_files),
    )
