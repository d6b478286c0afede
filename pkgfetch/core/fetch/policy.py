"""失败策略与结果回写

单个引用的状态流转:
  Pending → CacheCheck → CacheHit → Done
                       → CacheMiss → Fetching → Success → Done
                                              → Failure → 可选包 → Tolerated
                                                        → 必需包 → Fatal

只有 tolerable 的错误（TransportFetchError）在可选包上被容忍；
未知传输类型、缓存读取失败属于配置/存储问题，对可选包同样致命。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pkgfetch.core.models import FetchOutcome, FetchStatus

if TYPE_CHECKING:
    from pkgfetch.core.exceptions import FetchError
    from pkgfetch.core.models import FetchedMetadata, PackageReference
    from pkgfetch.core.protocols import PackageResolver, Reporter

logger = logging.getLogger(__name__)


class FailurePolicy:
    """致命 / 可容忍失败分类 + 成功结果回写"""

    def __init__(self, resolver: PackageResolver, reporter: Reporter) -> None:
        self.resolver = resolver
        self.reporter = reporter

    def classify(self, ref: PackageReference, error: FetchError) -> FetchOutcome:
        if ref.optional and error.tolerable:
            self.reporter.error(error.message)
            logger.warning("可选包 %s 拉取失败，继续: %s", ref.uid, error.message)
            return FetchOutcome(reference=ref, status=FetchStatus.TOLERATED, error=error)
        return FetchOutcome(reference=ref, status=FetchStatus.FATAL, error=error)

    def handle(
        self,
        ref: PackageReference,
        metadata: FetchedMetadata | None = None,
        error: FetchError | None = None,
    ) -> FetchedMetadata | None:
        """成功返回结果；可容忍失败返回 None；致命失败原样抛出"""
        if error is None:
            return metadata
        outcome = self.classify(ref, error)
        if outcome.fatal:
            raise error
        return None

    def write_back(self, ref: PackageReference, metadata: FetchedMetadata) -> None:
        """hash 无条件更新；resolved 仅在非空时更新（缓存命中不覆盖已有值）"""
        ref.remote.hash = metadata.hash
        if metadata.resolved:
            ref.remote.resolved = metadata.resolved
        self.resolver.update_manifest(ref, metadata.package)
