from pathlib import Path

import pytest

from lifecycle.errors import GroupError
from lifecycle.group import BuildpackGroup


def test_group_loads_toml_in_order(tmp_path: Path) -> None:
    group_path = tmp_path / "group.toml"
    group_path.write_text(
        """
[[buildpacks]]
id = "org.nodejs"
version = "1.2.0"

[[buildpacks]]
id = "org.procfile"
dir = "/custom/procfile"
"""
    )
    group = BuildpackGroup.from_file(group_path, buildpacks_dir=tmp_path / "bps")

    assert [bp.id for bp in group] == ["org.nodejs", "org.procfile"]
    assert group.buildpacks[0].dir == tmp_path / "bps" / "org.nodejs" / "1.2.0"
    assert group.buildpacks[1].dir == Path("/custom/procfile")
    assert group.buildpacks[1].version == "latest"
    assert "org.nodejs" in group
    assert len(group) == 2


def test_group_loads_json_and_yaml(tmp_path: Path) -> None:
    json_path = tmp_path / "group.json"
    json_path.write_text('{"buildpacks": [{"id": "bp1", "dir": "/bp1"}]}')
    yaml_path = tmp_path / "group.yaml"
    yaml_path.write_text("buildpacks:\n  - id: bp2\n    dir: /bp2\n")

    assert [bp.id for bp in BuildpackGroup.from_file(json_path)] == ["bp1"]
    assert [bp.id for bp in BuildpackGroup.from_file(yaml_path)] == ["bp2"]


def test_group_requires_buildpacks(tmp_path: Path) -> None:
    group_path = tmp_path / "group.toml"
    group_path.write_text("buildpacks = []\n")

    with pytest.raises(GroupError):
        BuildpackGroup.from_file(group_path)


def test_group_entry_requires_id_and_location() -> None:
    with pytest.raises(GroupError):
        BuildpackGroup.from_dict({"buildpacks": [{"version": "1"}]}, buildpacks_dir="/bps")
    with pytest.raises(GroupError):
        BuildpackGroup.from_dict({"buildpacks": [{"id": "bp1"}]})


def test_group_reports_unreadable_file(tmp_path: Path) -> None:
    with pytest.raises(GroupError):
        BuildpackGroup.from_file(tmp_path / "missing.toml")
    bad = tmp_path / "bad.toml"
    bad.write_text("buildpacks = [")
    with pytest.raises(GroupError):
        BuildpackGroup.from_file(bad)


def test_group_reports_undecodable_file(tmp_path: Path) -> None:
    for name in ("group.json", "group.toml"):
        bad = tmp_path / name
        bad.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(GroupError):
            BuildpackGroup.from_file(bad)
