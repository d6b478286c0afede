"""本地目录拉取器 - 复制 / 链接

- FileFetcher (file): 把源目录完整复制到落盘目录
- LinkFetcher (link): 工作区包，落盘目录内逐项建立指向源目录的符号链接
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.exceptions import TransportFetchError
from pkgfetch.core.fetch.cache import METADATA_FILENAME, directory_digest
from pkgfetch.core.fetch.fetchers.base import BaseFetcher

if TYPE_CHECKING:
    from pkgfetch.core.models import PackageRemote

logger = logging.getLogger(__name__)

_IGNORED = (".git", METADATA_FILENAME)


def _source_dir(remote: PackageRemote) -> Path:
    source = Path(remote.source).expanduser().resolve()
    if not source.is_dir():
        raise TransportFetchError(str(source), "源目录不存在")
    return source


class FileFetcher(BaseFetcher):
    """复制本地目录"""

    def _fetch_into_dest(self) -> tuple[str, str | None]:
        source = _source_dir(self.remote)
        shutil.copytree(
            source, self.dest,
            dirs_exist_ok=True, symlinks=True,
            ignore=shutil.ignore_patterns(*_IGNORED),
        )
        logger.info("本地复制就绪: %s -> %s", source, self.dest)
        return directory_digest(self.dest), str(source)


class LinkFetcher(BaseFetcher):
    """链接工作区目录，源目录本身不被写入"""

    def _fetch_into_dest(self) -> tuple[str, str | None]:
        source = _source_dir(self.remote)
        for child in sorted(source.iterdir()):
            if child.name in _IGNORED:
                continue
            (self.dest / child.name).symlink_to(child, target_is_directory=child.is_dir())
        logger.info("工作区链接就绪: %s -> %s", source, self.dest)
        return directory_digest(source), str(source)
