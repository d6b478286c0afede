"""拉取器基类

子类只需实现 _fetch_into_dest()：把内容写进 self.dest，返回 (hash, resolved)。
基类负责读取清单、最后写入完成标记并组装 FetchedMetadata。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.exceptions import TransportFetchError
from pkgfetch.core.fetch.cache import find_manifest, read_manifest, write_metadata
from pkgfetch.core.models import FetchedMetadata

if TYPE_CHECKING:
    from pkgfetch.core.config import Config
    from pkgfetch.core.models import PackageRemote

logger = logging.getLogger(__name__)


class BaseFetcher:
    """拉取器基类"""

    def __init__(self, dest: Path, remote: PackageRemote, config: Config) -> None:
        self.dest = dest
        self.remote = remote
        self.config = config

    def _fetch_into_dest(self) -> tuple[str, str | None]:
        raise NotImplementedError

    def fetch(self) -> FetchedMetadata:
        hash_, resolved = self._fetch_into_dest()

        manifest_path = find_manifest(self.dest, self.config.manifest_filenames)
        if manifest_path is None:
            raise TransportFetchError(
                self.remote.source,
                f"包内缺少清单文件 (期望: {', '.join(self.config.manifest_filenames)})",
            )
        manifest = read_manifest(manifest_path)

        write_metadata(self.dest, hash_, self.remote)
        logger.debug("完成标记已写入: %s", self.dest)
        return FetchedMetadata(package=manifest, resolved=resolved, hash=hash_, dest=self.dest)
