"""集中配置管理

拉取阶段用到的目录、并发度、超时等统一在此配置。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_FILENAMES = ("package.yml", "package.yaml", "package.json")


@dataclass
class Config:
    """全局配置"""

    # 目录
    cache_dir: str = "deps/cache"
    lockfile: str = "deps/lock.yml"

    # 拉取
    network_concurrency: int = 8
    network_timeout: int = 60  # 秒
    manifest_filenames: list[str] = field(
        default_factory=lambda: list(DEFAULT_MANIFEST_FILENAMES),
    )

    # 放不到字段里的配置项
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if int(self.network_concurrency) < 1:
            raise ConfigError(f"network_concurrency 必须 >= 1: {self.network_concurrency}")
        self.network_concurrency = int(self.network_concurrency)
        if not self.manifest_filenames:
            raise ConfigError("manifest_filenames 不能为空")

    @classmethod
    def from_file(cls, path: str = "configs/pkgfetch.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        data = load_yaml(path, kind="配置文件")
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"配置文件无效 {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "configs/pkgfetch.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
