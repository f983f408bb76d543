from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping


@dataclass(frozen=True)
class Buildpack:
    """One executable unit of a buildpack group and its on-disk location."""

    id: str
    dir: Path
    version: str = "latest"

    def executable(self, name: str) -> Path:
        return (Path(self.dir) / "bin" / name).absolute()


@dataclass(frozen=True)
class Process:
    """A named, launchable process declared by a buildpack."""

    type: str
    command: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Process":
        proc_type = data.get("type")
        command = data.get("command")
        if not isinstance(proc_type, str) or not isinstance(command, str):
            raise ValueError(f"process entry requires string 'type' and 'command': {dict(data)!r}")
        return cls(type=proc_type, command=command)

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "command": self.command}


def processes_from_toml(data: Mapping[str, Any]) -> List[Process]:
    entries = data.get("processes", [])
    if not isinstance(entries, list):
        raise ValueError("'processes' must be a list of tables")
    processes: List[Process] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ValueError(f"process entry must be a table: {entry!r}")
        processes.append(Process.from_dict(entry))
    return processes


@dataclass(frozen=True)
class BuildMetadata:
    """Merged launch processes of a build run, sorted by type."""

    processes: List[Process] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"processes": [proc.to_dict() for proc in self.processes]}


@dataclass(frozen=True)
class DevelopMetadata:
    """Merged develop processes of a develop run, sorted by type."""

    processes: List[Process] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"processes": [proc.to_dict() for proc in self.processes]}
