"""git 拉取器 - source 形如 <url>#<ref>，ref 缺省为 HEAD"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

from pkgfetch.core.exceptions import TransportFetchError, ValidationError
from pkgfetch.core.fetch.fetchers.base import BaseFetcher
from pkgfetch.utils.net import split_locator, validate_location

logger = logging.getLogger(__name__)

_SAFE_REF_RE = re.compile(r"^[a-zA-Z0-9_./@\-]+$")


class GitFetcher(BaseFetcher):
    """git 拉取器"""

    def _fetch_into_dest(self) -> tuple[str, str | None]:
        url, ref = split_locator(self.remote.source)
        validate_location(url, context="git clone")
        if ref and (ref.startswith("-") or not _SAFE_REF_RE.match(ref)):
            raise ValidationError(f"ref 包含非法字符: {ref}")

        self._clone(url, ref)
        sha = self._git(["rev-parse", "HEAD"], cwd=self.dest).strip()
        shutil.rmtree(self.dest / ".git", ignore_errors=True)

        logger.info("git 就绪: %s@%s (%s) -> %s", url, ref or "HEAD", sha[:12], self.dest)
        return sha, f"{url}#{sha}"

    def _clone(self, url: str, ref: str) -> None:
        """浅克隆，失败时回退到完整克隆 + checkout"""
        shallow = ["clone", "--depth", "1"]
        if ref:
            shallow += ["--branch", ref]
        try:
            self._git([*shallow, url, str(self.dest)])
            return
        except TransportFetchError:
            if not ref:
                raise
            logger.info("  浅克隆失败，回退到完整克隆: %s@%s", url, ref)

        # 浅克隆失败可能留下部分内容
        for child in self.dest.iterdir():
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()
        self._git(["clone", url, str(self.dest)])
        self._git(["checkout", ref], cwd=self.dest)

    def _git(self, args: list[str], cwd: Path | None = None) -> str:
        r = subprocess.run(
            ["git", *args],
            cwd=str(cwd) if cwd else None,
            capture_output=True, text=True, check=False,
            timeout=self.config.network_timeout * 10,
        )
        if r.returncode != 0:
            raise TransportFetchError(
                self.remote.source,
                f"git {args[0]} 失败 (rc={r.returncode}): {r.stderr[:300]}",
            )
        return r.stdout
