"""配置加载测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import pkgfetch.core.config as cfgmod
from pkgfetch.core.config import Config
from pkgfetch.core.exceptions import ConfigError


class TestConfig:
    def test_defaults(self) -> None:
        cfg = Config()
        assert cfg.cache_dir == "deps/cache"
        assert cfg.network_concurrency == 8
        assert cfg.manifest_filenames[0] == "package.yml"

    def test_from_missing_file(self, tmp_path: Path) -> None:
        assert Config.from_file(str(tmp_path / "none.yml")) == Config()

    def test_from_file_with_extra(self, tmp_path: Path) -> None:
        path = tmp_path / "pkgfetch.yml"
        path.write_text("cache_dir: /var/cache/pkg\nnetwork_concurrency: 2\nmirror: internal\n", encoding="utf-8")
        cfg = Config.from_file(str(path))
        assert cfg.cache_dir == "/var/cache/pkg"
        assert cfg.network_concurrency == 2
        assert cfg.extra == {"mirror": "internal"}

    @pytest.mark.parametrize("content", ["network_concurrency: 0\n", "network_concurrency: many\n"])
    def test_invalid_concurrency(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "pkgfetch.yml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            Config.from_file(str(path))

    def test_init_config_sets_singleton(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cfgmod, "_current", None)
        path = tmp_path / "pkgfetch.yml"
        path.write_text("lockfile: custom.lock\n", encoding="utf-8")
        cfgmod.init_config(str(path))
        assert cfgmod.get_config().lockfile == "custom.lock"
