"""tarball 拉取器 - http(s) 下载或本地 .tgz，解压到落盘目录"""

from __future__ import annotations

import hashlib
import logging
import shutil
import tarfile
import tempfile
import urllib.error
import urllib.request
import uuid
from pathlib import Path

from pkgfetch.core.exceptions import TransportFetchError
from pkgfetch.core.fetch.fetchers.base import BaseFetcher
from pkgfetch.utils.net import is_remote_url, validate_url_scheme

logger = logging.getLogger(__name__)

_CHUNK = 64 * 1024


def _sha256_file(path: Path) -> str:
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def _hoist_single_root(dest: Path) -> None:
    """tarball 常见的单一顶层目录（如 package/）上提一层"""
    entries = list(dest.iterdir())
    if len(entries) != 1 or not entries[0].is_dir() or entries[0].is_symlink():
        return
    # 先改名让出原名，子项可能与顶层目录同名（package/package/）
    root = entries[0].rename(dest / f".pkgfetch-hoist-{uuid.uuid4().hex}")
    for child in list(root.iterdir()):
        shutil.move(str(child), str(dest / child.name))
    root.rmdir()


class TarballFetcher(BaseFetcher):
    """tarball 拉取器"""

    def _fetch_into_dest(self) -> tuple[str, str | None]:
        source = self.remote.source
        with tempfile.TemporaryDirectory(prefix=".pkgfetch-", dir=str(self.dest.parent)) as tmp:
            if is_remote_url(source):
                archive = Path(tmp) / "package.tgz"
                self._download(source, archive)
            else:
                archive = Path(source).expanduser()
                if not archive.is_file():
                    raise TransportFetchError(source, f"tarball 不存在: {archive}")

            actual = _sha256_file(archive)
            expected = self.remote.hash
            if expected and expected != actual:
                raise TransportFetchError(
                    source, f"校验和不匹配: 期望 {expected}, 实际 {actual}",
                )

            try:
                with tarfile.open(archive) as tf:
                    tf.extractall(path=str(self.dest), filter="data")  # noqa: S202
            except tarfile.TarError as e:
                raise TransportFetchError(source, f"解压失败: {e}") from e

        _hoist_single_root(self.dest)
        logger.info("tarball 就绪: %s -> %s", source, self.dest)
        return actual, f"{source}#{actual}"

    def _download(self, url: str, target: Path) -> None:
        validate_url_scheme(url, context="tarball download")
        logger.info("  下载: %s", url)
        try:
            with urllib.request.urlopen(url, timeout=self.config.network_timeout) as resp:  # nosec B310
                with open(target, "wb") as out:
                    shutil.copyfileobj(resp, out, _CHUNK)
        except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
            raise TransportFetchError(url, f"下载失败: {e}") from e
