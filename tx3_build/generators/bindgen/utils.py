"""Utility functions for binding generation."""
import glob
from pathlib import Path
from typing import Dict, Iterable, List, Optional

# File extension emitted by tx3-bindgen for each target language
TARGET_EXTENSIONS: Dict[str, str] = {
    "typescript": "ts",
    "python": "py",
    "rust": "rs",
    "go": "go",
}


def artifact_extension(target: str) -> Optional[str]:
    """Return the artifact extension for a target, or None for unknown targets."""
    return TARGET_EXTENSIONS.get(target.lower())


def artifact_pattern(output_dir: Path, target: str) -> str:
    """Glob pattern matching generated artifacts under output_dir."""
    ext = artifact_extension(target)
    if ext is None:
        return str(output_dir / "**" / "*")
    return str(output_dir / "**" / f"*.{ext}")


def find_artifacts(output_dir: Path, target: str) -> List[Path]:
    matches = glob.glob(artifact_pattern(output_dir, target), recursive=True)
    return sorted(Path(m) for m in matches if Path(m).is_file())


def has_magic(pattern: str) -> bool:
    return glob.has_magic(pattern)


def is_watched(changed: Path, watched: Iterable[Path]) -> bool:
    """
    Check whether a changed path is one of the watched paths, falls under a
    watched directory, or is currently matched by a watched glob pattern.
    """
    for entry in watched:
        entry_str = str(entry)
        if has_magic(entry_str):
            # Expanded like the inputs themselves, so "*" stays within one directory
            if any(Path(m) == changed for m in glob.iglob(entry_str, recursive=True)):
                return True
            continue
        if changed == entry or entry in changed.parents:
            return True
    return False


def parse_key_values(pairs: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse ["KEY=VALUE", ...] into an ordered dict."""
    result: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected KEY=VALUE, got: {pair!r}")
        result[key] = value
    return result
