"""锁文件解析器

职责:
- 从 YAML 锁文件加载已解析的包引用
- 接收拉取阶段回写的清单（线程安全）
- 将更新后的 hash / resolved 原子写回锁文件

锁文件格式:
    packages:
      left-pad:
        version: 1.3.0
        optional: false
        remote:
          type: tarball
          source: https://registry.example.com/left-pad/-/left-pad-1.3.0.tgz
          hash: 5c5e...
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from pkgfetch.core.exceptions import ConfigError
from pkgfetch.core.models import Manifest, PackageReference, PackageRemote
from pkgfetch.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class LockfileResolver:
    """基于锁文件的引用提供者 + 清单存储"""

    section_key = "packages"

    def __init__(self, lockfile: str | Path) -> None:
        self.lockfile = Path(lockfile)
        self._data: dict[str, Any] = load_yaml(self.lockfile, kind="锁文件")
        self._references: list[PackageReference] | None = None
        self._lock = threading.Lock()
        self.manifests: dict[str, Manifest] = {}

    def _section(self) -> dict[str, dict[str, Any]]:
        section = self._data.setdefault(self.section_key, {})
        if not isinstance(section, dict):
            raise ConfigError(f"锁文件 {self.lockfile} 的 '{self.section_key}' 段必须是映射")
        return section

    def get_package_references(self) -> list[PackageReference]:
        """加载全部引用（同一实例多次调用返回同一批对象）"""
        if self._references is None:
            self._references = [
                self._parse_entry(name, info) for name, info in self._section().items()
            ]
            logger.info("已加载 %d 个包引用: %s", len(self._references), self.lockfile)
        return self._references

    def _parse_entry(self, name: str, info: Any) -> PackageReference:
        if not isinstance(info, dict):
            raise ConfigError(f"包 '{name}' 的锁文件条目必须是映射")
        remote = info.get("remote")
        if not isinstance(remote, dict) or not remote.get("type") or not remote.get("source"):
            raise ConfigError(f"包 '{name}' 缺少 remote.type / remote.source")
        return PackageReference(
            name=name,
            version=str(info.get("version", "latest")),
            optional=bool(info.get("optional", False)),
            remote=PackageRemote(
                type=str(remote["type"]),
                source=str(remote["source"]),
                resolved=remote.get("resolved"),
                hash=remote.get("hash"),
            ),
        )

    def update_manifest(self, reference: PackageReference, manifest: Manifest) -> None:
        """记录拉取到的最新清单"""
        with self._lock:
            self.manifests[reference.name] = manifest

    def save(self) -> None:
        """把引用的 remote 变更写回锁文件"""
        section = self._section()
        with self._lock:
            for ref in self.get_package_references():
                entry = section.setdefault(ref.name, {})
                entry["version"] = ref.version
                if ref.optional:
                    entry["optional"] = True
                entry["remote"] = ref.remote.to_dict()
        save_yaml(self.lockfile, self._data, kind="锁文件")
        logger.info("锁文件已更新: %s", self.lockfile)
