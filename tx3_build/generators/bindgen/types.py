"""Types for binding generation."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field


class Tx3PluginOptions(BaseModel):
    """User-supplied plugin options. Only input_files is required."""
    input_files: List[str] = Field(..., examples=[["protocol/*.tx3"]])
    bindgen_path: Optional[str] = None
    output_dir: Optional[str] = None
    bindgen_args: Optional[List[str]] = None
    trp_endpoint: Optional[str] = None
    trp_headers: Optional[Dict[str, str]] = None
    env_args: Optional[Dict[str, str]] = None
    target: Optional[str] = None


@dataclass(frozen=True)
class GenerationConfig:
    """Fully defaulted options, created once per plugin instance."""
    bindgen_path: str
    input_files: Tuple[Path, ...]
    output_dir: Path
    bindgen_args: Tuple[str, ...] = ()
    trp_endpoint: str = "http://localhost:3000"
    trp_headers: Dict[str, str] = field(default_factory=dict)
    env_args: Dict[str, str] = field(default_factory=dict)
    target: str = "typescript"
    root: Path = field(default_factory=Path.cwd)
    patterns: Tuple[str, ...] = ()  # Input patterns as given, re-resolved by watchers


@dataclass(frozen=True)
class GenerationRequest:
    """A concrete generator command line."""
    executable: str
    args: Tuple[str, ...]

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)
