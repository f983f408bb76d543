"""Environment store used to compose buildpack layers into child environments."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from .errors import EnvError
from .utils import list_entries

logger = logging.getLogger(__name__)

POSIX_ROOT_DIR_MAP: Dict[str, Sequence[str]] = {
    "bin": ("PATH",),
    "lib": ("LD_LIBRARY_PATH", "LIBRARY_PATH"),
    "include": ("CPATH",),
    "pkgconfig": ("PKG_CONFIG_PATH",),
}


class Env(Protocol):
    """Capability interface the builder composes layers through."""

    def append_dirs(self, base_dir: str | Path) -> None: ...

    def add_env_dir(self, env_dir: str | Path) -> None: ...

    def set_env_dir(self, env_dir: str | Path) -> None: ...

    def list(self) -> List[str]: ...


class BuildEnv:
    """In-memory environment seeded from ``os.environ`` or an explicit mapping."""

    def __init__(
        self,
        values: Optional[Mapping[str, str]] = None,
        root_dir_map: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self._vars: Dict[str, str] = dict(os.environ if values is None else values)
        self.root_dir_map = dict(POSIX_ROOT_DIR_MAP if root_dir_map is None else root_dir_map)

    def get(self, key: str, default: str = "") -> str:
        return self._vars.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._vars[key] = value

    def prepend(self, key: str, value: str) -> None:
        current = self._vars.get(key, "")
        self._vars[key] = value + os.pathsep + current if current else value

    def append_dirs(self, base_dir: str | Path) -> None:
        base = Path(base_dir).absolute()
        for sub_dir, keys in self.root_dir_map.items():
            candidate = base / sub_dir
            if not candidate.is_dir():
                continue
            for key in keys:
                self.prepend(key, str(candidate))
                logger.debug("prepended %s to %s", candidate, key)

    def set_env_dir(self, env_dir: str | Path) -> None:
        self._each_env_file(env_dir, self.set)

    def add_env_dir(self, env_dir: str | Path) -> None:
        self._each_env_file(env_dir, self.prepend)

    def list(self) -> List[str]:
        return [f"{key}={value}" for key, value in sorted(self._vars.items())]

    def _each_env_file(self, env_dir: str | Path, fn: Callable[[str, str], None]) -> None:
        env_dir = Path(env_dir)
        if not env_dir.exists():
            return
        try:
            for entry in list_entries(env_dir):
                if not entry.is_file():
                    continue
                fn(entry.name, entry.read_text())
        except (OSError, UnicodeDecodeError) as exc:
            raise EnvError(f"failed to read env directory {env_dir}: {exc}") from exc
