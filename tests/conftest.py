from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from lifecycle.env import BuildEnv
from lifecycle.models import Buildpack

BASE_PATH = "/usr/local/bin:/usr/bin:/bin"


def _write_script(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nset -e\n" + body + "\n")
    path.chmod(0o755)


@pytest.fixture
def make_buildpack(tmp_path: Path) -> Callable[..., Buildpack]:
    def _make(bp_id: str, build: Optional[str] = None, develop: Optional[str] = None) -> Buildpack:
        bp_dir = tmp_path / "buildpacks" / bp_id
        if build is not None:
            _write_script(bp_dir / "bin" / "build", build)
        if develop is not None:
            _write_script(bp_dir / "bin" / "develop", develop)
        bp_dir.mkdir(parents=True, exist_ok=True)
        return Buildpack(id=bp_id, dir=bp_dir)

    return _make


@pytest.fixture
def dirs(tmp_path: Path) -> dict:
    layout = {name: tmp_path / name for name in ("app", "launch", "cache", "platform")}
    for path in layout.values():
        path.mkdir()
    return layout


@pytest.fixture
def build_env() -> BuildEnv:
    return BuildEnv({"PATH": BASE_PATH})


def process_toml(*procs: tuple, target: str = "$1/launch.toml") -> str:
    """Shell snippet writing a process TOML file with the given (type, command) pairs."""

    lines = []
    for proc_type, command in procs:
        lines.append(f'[[processes]]\\ntype = \\"{proc_type}\\"\\ncommand = \\"{command}\\"\\n')
    return 'printf "' + "".join(lines) + '" > "' + target + '"'
