"""单包拉取执行器

缓存检查 → 拉取器分派 → 成功 / 失败清理。

落盘目录在任意两次运行之间要么不存在，要么完整有效:
  - 缓存无效时先整体删除旧目录，残留的半成品不会混入新一次拉取
  - 拉取失败时尽力删除目录；清理本身的失败只记录，不覆盖原始错误
  - 完成标记由拉取器最后写入（见 cache.write_metadata）
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.exceptions import CleanupError, FetchError, TransportFetchError
from pkgfetch.core.fetch.cache import remove_directory
from pkgfetch.core.models import FetchedMetadata

if TYPE_CHECKING:
    from pkgfetch.core.config import Config
    from pkgfetch.core.fetch.cache import CacheGate
    from pkgfetch.core.fetch.registry import FetcherRegistry
    from pkgfetch.core.models import PackageReference

logger = logging.getLogger(__name__)


class FetchExecutor:
    """单个引用的拉取执行器

    只写入该引用自己的落盘目录，不修改引用对象（回写由调用方完成）。
    """

    def __init__(self, cache: CacheGate, registry: FetcherRegistry, config: Config) -> None:
        self.cache = cache
        self.registry = registry
        self.config = config

    def fetch(self, ref: PackageReference) -> FetchedMetadata:
        dest = self.cache.destination(ref)

        if self.cache.is_valid(dest):
            cached = self.cache.read(dest, ref.name)
            logger.info("缓存命中: %s -> %s", ref.uid, dest)
            return FetchedMetadata(
                package=cached.package, resolved=None, hash=cached.hash, dest=dest,
                cached=True,
            )

        # 未知传输类型在建目录之前报错，不留下空目录
        try:
            remove_directory(dest)
        except OSError as e:
            raise TransportFetchError(ref.name, f"无法删除失效缓存 {dest}: {e}") from e
        factory = self.registry.lookup(ref.remote.type, package=ref.name)

        logger.info("拉取: %s (type=%s)", ref.uid, ref.remote.type)
        try:
            dest.mkdir(parents=True, exist_ok=True)
            fetcher = factory(dest, ref.remote, self.config)
            return fetcher.fetch()
        except Exception as e:
            error = self._as_fetch_error(ref, e)
            self._discard(dest, ref, error)
            if error is e:
                raise
            raise error from e

    @staticmethod
    def _as_fetch_error(ref: PackageReference, exc: Exception) -> FetchError:
        if isinstance(exc, FetchError) and exc.package == ref.name:
            return exc
        return TransportFetchError(ref.name, exc)

    @staticmethod
    def _discard(dest: Path, ref: PackageReference, primary: FetchError) -> None:
        """尽力删除失败的落盘目录，二次失败挂到原始错误上"""
        try:
            remove_directory(dest)
        except OSError as e:
            primary.secondary = CleanupError(ref.name, f"清理目录失败 {dest}: {e}")
            logger.warning("%s", primary.secondary)
