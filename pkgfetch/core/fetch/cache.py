"""缓存门禁

职责:
- 由引用身份确定性地计算落盘目录
- 判断目录是否已持有完整有效的包（完成标记 + 清单）
- 读取缓存的 hash 与清单
- 写入完成标记（拉取器的最后一步）

目录内容完整性约定:
  拉取器先写入全部文件，最后原子写入 .pkgfetch-metadata.json。
  没有完成标记的目录一律视为未完成，下次拉取前会被整体删除。
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

import yaml

from pkgfetch.core.exceptions import CacheReadError
from pkgfetch.utils.yaml_io import atomic_write

if TYPE_CHECKING:
    from pkgfetch.core.models import Manifest, PackageReference, PackageRemote

logger = logging.getLogger(__name__)

METADATA_FILENAME = ".pkgfetch-metadata.json"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def _safe_segment(raw: str) -> str:
    return _UNSAFE_CHARS_RE.sub("_", raw)


def directory_digest(root: Path) -> str:
    """目录内容摘要：按相对路径排序后对路径与字节做 sha256（忽略完成标记）"""
    digest = hashlib.sha256()
    root = root.resolve()
    files = sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.name != METADATA_FILENAME and ".git" not in p.relative_to(root).parts
    )
    for path in files:
        digest.update(path.relative_to(root).as_posix().encode("utf-8"))
        digest.update(path.read_bytes())
    return digest.hexdigest()


def find_manifest(dest: Path, filenames: Sequence[str]) -> Path | None:
    for name in filenames:
        candidate = dest / name
        if candidate.is_file():
            return candidate
    return None


def read_manifest(path: Path) -> Manifest:
    """解析清单文件（YAML，兼容 JSON），内容必须是映射"""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"清单内容不是映射: {path}")
    return data


def write_metadata(dest: Path, hash_: str, remote: PackageRemote) -> None:
    """写入完成标记，之后目录即被视为有效缓存"""
    payload = {"hash": hash_, "remote": {"type": remote.type, "source": remote.source}}
    atomic_write(dest / METADATA_FILENAME, json.dumps(payload, sort_keys=True))


def remove_directory(path: Path) -> None:
    """删除目录（或指向目录的符号链接），不存在时忽略"""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


@dataclass(frozen=True)
class CachedPackage:
    hash: str
    package: Manifest


class CacheGate:
    """落盘目录计算 + 缓存有效性判断"""

    def __init__(self, cache_dir: str | Path, manifest_filenames: Sequence[str]) -> None:
        self.cache_dir = Path(cache_dir)
        self.manifest_filenames = tuple(manifest_filenames)

    def destination(self, reference: PackageReference) -> Path:
        """纯函数：同一引用跨进程始终映射到同一目录

        目录名只取身份字段（传输类型、包名、版本、来源），不含可变的 hash。
        """
        remote = reference.remote
        identity = f"{remote.type}:{reference.name}:{reference.version}:{remote.source}"
        suffix = hashlib.sha1(identity.encode("utf-8"), usedforsecurity=False).hexdigest()[:8]
        dirname = "-".join((
            _safe_segment(remote.type),
            _safe_segment(reference.name),
            _safe_segment(reference.version),
            suffix,
        ))
        return self.cache_dir / dirname

    def is_valid(self, dest: Path) -> bool:
        if not dest.is_dir():
            return False
        if not (dest / METADATA_FILENAME).is_file():
            return False
        return find_manifest(dest, self.manifest_filenames) is not None

    def read(self, dest: Path, package: str = "") -> CachedPackage:
        """读取缓存的 hash 与清单；目录有效但内容损坏时报 CacheReadError"""
        label = package or dest.name
        try:
            meta = json.loads((dest / METADATA_FILENAME).read_text(encoding="utf-8"))
            hash_ = meta["hash"]
            manifest_path = find_manifest(dest, self.manifest_filenames)
            if manifest_path is None:
                raise FileNotFoundError(f"缺少清单文件: {dest}")
            manifest = read_manifest(manifest_path)
        except (OSError, ValueError, KeyError, TypeError, yaml.YAMLError) as e:
            raise CacheReadError(label, f"缓存元数据无法解析 ({dest}): {e}") from e
        return CachedPackage(hash=str(hash_), package=manifest)
