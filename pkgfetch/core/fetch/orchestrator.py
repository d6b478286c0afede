"""拉取阶段编排器

把已解析的引用全部落盘:

    resolver = LockfileResolver("deps/lock.yml")
    fetcher = PackageFetcher(get_config(), resolver, reporter=ConsoleReporter())
    summary = fetcher.init()
    resolver.save()

每个引用由且仅由一个任务处理: 拉取 → 失败分类 → 回写 → 进度。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pkgfetch.core.exceptions import FetchError
from pkgfetch.core.fetch.cache import CacheGate
from pkgfetch.core.fetch.executor import FetchExecutor
from pkgfetch.core.fetch.policy import FailurePolicy
from pkgfetch.core.fetch.registry import FetcherRegistry, default_registry
from pkgfetch.core.fetch.scheduler import ConcurrencyScheduler
from pkgfetch.core.models import FetchOutcome
from pkgfetch.core.reporter import NullReporter

if TYPE_CHECKING:
    from pkgfetch.core.config import Config
    from pkgfetch.core.models import FetchedMetadata, FetchSummary, PackageReference
    from pkgfetch.core.protocols import PackageResolver, Reporter

logger = logging.getLogger(__name__)


class PackageFetcher:
    """拉取阶段唯一入口"""

    def __init__(
        self,
        config: Config,
        resolver: PackageResolver,
        *,
        reporter: Reporter | None = None,
        registry: FetcherRegistry | None = None,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.reporter = reporter or NullReporter()
        self.cache = CacheGate(Path(config.cache_dir), config.manifest_filenames)
        self.executor = FetchExecutor(self.cache, registry or default_registry(), config)
        self.policy = FailurePolicy(resolver, self.reporter)
        self.scheduler = ConcurrencyScheduler(config.network_concurrency)

    def fetch(self, ref: PackageReference) -> FetchedMetadata:
        return self.executor.fetch(ref)

    def maybe_fetch(self, ref: PackageReference) -> FetchedMetadata | None:
        """可选包的可容忍失败返回 None，其余失败照常抛出"""
        try:
            metadata = self.fetch(ref)
        except FetchError as e:
            return self.policy.handle(ref, error=e)
        return self.policy.handle(ref, metadata=metadata)

    def _process(self, ref: PackageReference) -> FetchOutcome:
        try:
            metadata = self.fetch(ref)
        except FetchError as e:
            return self.policy.classify(ref, e)
        self.policy.write_back(ref, metadata)
        return FetchOutcome.done(ref, metadata)

    def init(self, refs: list[PackageReference] | None = None) -> FetchSummary:
        """拉取全部引用，致命失败时抛出对应的 FetchError"""
        if refs is None:
            refs = self.resolver.get_package_references()
        tick = self.reporter.progress(len(refs))
        summary = self.scheduler.run(refs, self._process, tick)
        logger.info(
            "拉取完成: %d 新拉取, %d 缓存命中, %d 已跳过",
            len(summary.fetched), len(summary.cached), len(summary.tolerated),
        )
        return summary
