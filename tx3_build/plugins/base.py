"""Hook contracts shared with the host build tool and dev server."""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Protocol, Sequence, Union


@dataclass(frozen=True)
class AliasEntry:
    """Module-resolution rewrite: imports starting with match go to replacement."""
    match: str
    replacement: str


AliasConfig = Union[Mapping[str, str], Sequence[Union[AliasEntry, Mapping[str, str]]], None]


def normalize_aliases(aliases: AliasConfig) -> List[AliasEntry]:
    """
    Normalize alias config into an ordered list of AliasEntry.

    Accepts a {match: replacement} mapping, or a list of AliasEntry or
    {"match"/"find": ..., "replacement": ...} dicts.
    """
    if not aliases:
        return []
    if isinstance(aliases, Mapping):
        return [AliasEntry(str(k), str(v)) for k, v in aliases.items()]
    entries = []
    for item in aliases:
        if isinstance(item, AliasEntry):
            entries.append(item)
        else:
            match = item.get("match", item.get("find"))
            entries.append(AliasEntry(str(match), str(item["replacement"])))
    return entries


def resolve_alias(specifier: str, aliases: Iterable[AliasEntry]) -> str:
    """Apply the first matching alias to an import specifier."""
    for alias in aliases:
        if specifier == alias.match or specifier.startswith(alias.match + "/"):
            return alias.replacement + specifier[len(alias.match):]
    return specifier


class Watcher(Protocol):
    def add(self, paths: List[str]) -> None: ...

    def on(self, event: str, callback: Callable[[str], None]) -> Any: ...


class ModuleGraph(Protocol):
    def invalidate_all(self) -> None: ...


class ReloadChannel(Protocol):
    def send(self, payload: Dict[str, Any]) -> None: ...


class DevServer(Protocol):
    watcher: Watcher
    module_graph: ModuleGraph
    ws: ReloadChannel


class BuildPlugin:
    name: str

    def build_start(self) -> None:
        raise NotImplementedError

    def build_end(self) -> None:
        raise NotImplementedError
