"""锁文件解析器测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.core.resolver import LockfileResolver


def _write_lockfile(tmp_path: Path, data: dict) -> Path:
    lockfile = tmp_path / "lock.yml"
    lockfile.write_text(yaml.dump(data, allow_unicode=True, sort_keys=False), encoding="utf-8")
    return lockfile


class TestLockfileResolver:
    def test_load_references(self, tmp_path: Path) -> None:
        lockfile = _write_lockfile(tmp_path, {
            "packages": {
                "left-pad": {
                    "version": "1.3.0",
                    "remote": {"type": "tarball", "source": "https://r.example.com/left-pad.tgz"},
                },
                "fsevents": {
                    "version": "2.3.2",
                    "optional": True,
                    "remote": {
                        "type": "git", "source": "https://git.example.com/fsevents.git#v2.3.2",
                        "resolved": "https://git.example.com/fsevents.git#abc", "hash": "abc",
                    },
                },
            },
        })
        refs = LockfileResolver(lockfile).get_package_references()
        assert [r.name for r in refs] == ["left-pad", "fsevents"]
        assert refs[0].optional is False
        assert refs[0].remote.hash is None
        assert refs[1].optional is True
        assert refs[1].remote.resolved == "https://git.example.com/fsevents.git#abc"

    def test_missing_lockfile_is_empty(self, tmp_path: Path) -> None:
        assert LockfileResolver(tmp_path / "none.yml").get_package_references() == []

    def test_same_objects_on_repeat_calls(self, tmp_path: Path) -> None:
        lockfile = _write_lockfile(tmp_path, {
            "packages": {"a": {"version": "1", "remote": {"type": "file", "source": "/x"}}},
        })
        resolver = LockfileResolver(lockfile)
        assert resolver.get_package_references()[0] is resolver.get_package_references()[0]

    @pytest.mark.parametrize("entry", [
        "not-a-mapping",
        {"version": "1"},
        {"version": "1", "remote": {"type": "tarball"}},
    ])
    def test_invalid_entry(self, tmp_path: Path, entry) -> None:  # type: ignore[no-untyped-def]
        lockfile = _write_lockfile(tmp_path, {"packages": {"bad": entry}})
        with pytest.raises(ConfigError, match="bad"):
            LockfileResolver(lockfile).get_package_references()

    def test_malformed_lockfile(self, tmp_path: Path) -> None:
        lockfile = tmp_path / "lock.yml"
        lockfile.write_text("packages:\n  left-pad: {version: 1\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="锁文件解析失败"):
            LockfileResolver(lockfile)

    def test_save_writes_back_remote(self, tmp_path: Path) -> None:
        lockfile = _write_lockfile(tmp_path, {
            "packages": {
                "left-pad": {
                    "version": "1.3.0",
                    "remote": {"type": "tarball", "source": "https://r.example.com/left-pad.tgz"},
                },
            },
        })
        resolver = LockfileResolver(lockfile)
        ref = resolver.get_package_references()[0]
        ref.remote.hash = "h1"
        ref.remote.resolved = "https://r.example.com/left-pad.tgz#h1"
        resolver.update_manifest(ref, {"name": "left-pad"})
        resolver.save()

        data = yaml.safe_load(lockfile.read_text(encoding="utf-8"))
        remote = data["packages"]["left-pad"]["remote"]
        assert remote["hash"] == "h1"
        assert remote["resolved"].endswith("#h1")
        assert resolver.manifests == {"left-pad": {"name": "left-pad"}}
