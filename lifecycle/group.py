from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Mapping, Optional

from .errors import GroupError
from .models import Buildpack
from .utils import TOMLDecodeError, load_toml


def _read_group_file(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return load_toml(path)
        raw_text = path.read_text()
    except (TOMLDecodeError, UnicodeDecodeError) as exc:
        raise GroupError(f"Invalid group file {path}: {exc}") from exc
    except OSError as exc:
        raise GroupError(f"Cannot read group file {path}: {exc}") from exc

    if suffix in (".yaml", ".yml"):
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise GroupError("PyYAML is required to parse YAML group files") from exc
        try:
            return yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise GroupError(f"Invalid group file {path}: {exc}") from exc
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise GroupError(f"Invalid group file {path}: {exc}") from exc


@dataclass
class BuildpackGroup:
    """Ordered buildpacks selected for a build, in execution order."""

    buildpacks: List[Buildpack] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, buildpacks_dir: Optional[str | Path] = None) -> "BuildpackGroup":
        if not isinstance(data, Mapping) or not isinstance(data.get("buildpacks"), list):
            raise GroupError("Group must contain a top-level 'buildpacks' list")
        entries = data["buildpacks"]
        if not entries:
            raise GroupError("Group must contain at least one buildpack")

        buildpacks: List[Buildpack] = []
        for entry in entries:
            if not isinstance(entry, Mapping) or not entry.get("id"):
                raise GroupError(f"Buildpack entry is missing an 'id': {entry!r}")
            bp_id = str(entry["id"])
            version = str(entry.get("version", "latest"))
            if entry.get("dir"):
                bp_dir = Path(entry["dir"])
            elif buildpacks_dir is not None:
                bp_dir = Path(buildpacks_dir) / bp_id / version
            else:
                raise GroupError(f"Buildpack {bp_id!r} has no 'dir' and no buildpacks directory was given")
            buildpacks.append(Buildpack(id=bp_id, dir=bp_dir, version=version))
        return cls(buildpacks=buildpacks)

    @classmethod
    def from_file(cls, path: str | Path, buildpacks_dir: Optional[str | Path] = None) -> "BuildpackGroup":
        return cls.from_dict(_read_group_file(Path(path)), buildpacks_dir=buildpacks_dir)

    def __iter__(self) -> Iterator[Buildpack]:
        return iter(self.buildpacks)

    def __len__(self) -> int:
        return len(self.buildpacks)

    def __contains__(self, bp_id: str) -> bool:
        return any(bp.id == bp_id for bp in self.buildpacks)
