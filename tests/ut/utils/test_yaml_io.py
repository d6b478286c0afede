"""YAML 读写与原子写入测试"""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils import yaml_io
from pkgfetch.utils.yaml_io import atomic_write, load_yaml, save_yaml


class TestLoadYaml:
    def test_missing_and_empty(self, tmp_path: Path) -> None:
        assert load_yaml(tmp_path / "none.yml") == {}
        empty = tmp_path / "empty.yml"
        empty.write_text("", encoding="utf-8")
        assert load_yaml(empty) == {}

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="锁文件顶层必须是映射"):
            load_yaml(path, kind="锁文件")

    def test_syntax_error_wrapped(self, tmp_path: Path) -> None:
        path = tmp_path / "lock.yml"
        path.write_text("packages: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="锁文件解析失败") as exc:
            load_yaml(path, kind="锁文件")
        assert exc.value.code == "CONFIG_ERROR"

    def test_too_large(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(yaml_io, "MAX_YAML_SIZE", 4)
        path = tmp_path / "big.yml"
        path.write_text("key: value\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件过大"):
            load_yaml(path, kind="配置文件")


class TestSaveYaml:
    def test_roundtrip_keeps_order(self, tmp_path: Path) -> None:
        path = tmp_path / "sub" / "lock.yml"
        save_yaml(path, {"packages": {"b": {"version": "1"}, "a": {"version": "2"}}})
        assert list(load_yaml(path)["packages"]) == ["b", "a"]

    def test_write_failure_keeps_original(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        path = tmp_path / "lock.yml"
        path.write_text("packages: {}\n", encoding="utf-8")

        def broken_replace(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(yaml_io.os, "replace", broken_replace)
        with pytest.raises(ConfigError, match="锁文件写入失败"):
            save_yaml(path, {"packages": {"a": {"version": "1"}}}, kind="锁文件")
        assert path.read_text(encoding="utf-8") == "packages: {}\n"
        assert [p.name for p in tmp_path.iterdir()] == ["lock.yml"]


def test_atomic_write_failure_leaves_no_temp(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken_replace(src: str, dst: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(yaml_io.os, "replace", broken_replace)
    with pytest.raises(OSError, match="disk full"):
        atomic_write(tmp_path / "marker.json", "{}")
    assert list(tmp_path.iterdir()) == []
