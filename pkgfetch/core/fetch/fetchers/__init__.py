"""内置拉取器

新增传输类型: 继承 BaseFetcher 实现 _fetch_into_dest()，
再通过 FetcherRegistry.register() 注册。
"""

from pkgfetch.core.fetch.fetchers.base import BaseFetcher
from pkgfetch.core.fetch.fetchers.file import FileFetcher, LinkFetcher
from pkgfetch.core.fetch.fetchers.git import GitFetcher
from pkgfetch.core.fetch.fetchers.tarball import TarballFetcher
from pkgfetch.core.protocols import FetcherFactory

BUILTIN_FETCHERS: dict[str, FetcherFactory] = {
    "tarball": TarballFetcher,
    "git": GitFetcher,
    "file": FileFetcher,
    "link": LinkFetcher,
}

__all__ = [
    "BUILTIN_FETCHERS",
    "BaseFetcher",
    "FileFetcher",
    "GitFetcher",
    "LinkFetcher",
    "TarballFetcher",
]
