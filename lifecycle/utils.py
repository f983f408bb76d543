from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import IO, Callable, Dict, List, Mapping, Optional, Sequence

try:  # pragma: no cover - tomllib is stdlib from 3.11 onwards
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - fallback for 3.10
    import tomli as tomllib  # type: ignore

TOMLDecodeError = tomllib.TOMLDecodeError

DIR_MODE = 0o777


class CommandError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status code."""

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(f"Command {' '.join(self.command)} failed with exit code {returncode}")


def run_command(
    command: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    stdout: Optional[IO] = None,
    stderr: Optional[IO] = None,
) -> int:
    """Run ``command`` to completion with its output routed to the given sinks.

    ``env`` replaces the child's environment entirely when provided. ``None``
    sinks inherit the caller's streams. Raises ``CommandError`` on a non-zero
    exit and ``OSError`` when the executable cannot be started.
    """

    result = subprocess.run(
        list(command),
        cwd=str(cwd) if cwd else None,
        env=dict(env) if env is not None else None,
        stdout=stdout,
        stderr=stderr,
        check=False,
    )
    if result.returncode != 0:
        raise CommandError(command, result.returncode)
    return result.returncode


def env_list_to_mapping(entries: Sequence[str]) -> Dict[str, str]:
    """Convert ``KEY=VALUE`` strings into a mapping, splitting at the first ``=``."""

    mapping: Dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep:
            continue
        mapping[key] = value
    return mapping


def ensure_directory(path: str | Path, mode: int = DIR_MODE) -> Path:
    """Create a directory (and parents) if missing and return its Path object."""

    path = Path(path)
    path.mkdir(mode=mode, parents=True, exist_ok=True)
    return path


def list_entries(path: str | Path) -> List[Path]:
    """Return the entries of ``path`` sorted by name."""

    return sorted(Path(path).iterdir(), key=lambda p: p.name)


def each_dir(entries: Sequence[Path], fn: Callable[[Path], None]) -> None:
    """Apply ``fn`` to every directory in ``entries``, stopping at the first error."""

    for entry in entries:
        if not entry.is_dir():
            continue
        fn(entry)


def load_toml(path: str | Path) -> Mapping[str, object]:
    with open(path, "rb") as file_handle:
        return tomllib.load(file_handle)


def dump_json(path: str | Path, payload: Mapping[str, object], *, indent: int = 2) -> None:
    """Write structured JSON to disk with a trailing newline for readability."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=indent, sort_keys=True) + "\n")
