"""拉取阶段模块

拆分说明:
- cache.py: 落盘目录计算 + 缓存有效性判断
- registry.py: 传输类型 → 拉取器注册表
- executor.py: 单包拉取（含失败清理）
- scheduler.py: 有界并发调度
- policy.py: 致命 / 可容忍失败分类 + 回写
- orchestrator.py: 拉取阶段入口 PackageFetcher
- fetchers/: 内置拉取器 tarball / git / file / link
"""

from pkgfetch.core.fetch.cache import CacheGate
from pkgfetch.core.fetch.executor import FetchExecutor
from pkgfetch.core.fetch.orchestrator import PackageFetcher
from pkgfetch.core.fetch.policy import FailurePolicy
from pkgfetch.core.fetch.registry import FetcherRegistry, default_registry
from pkgfetch.core.fetch.scheduler import ConcurrencyScheduler

__all__ = [
    "CacheGate",
    "ConcurrencyScheduler",
    "FailurePolicy",
    "FetchExecutor",
    "FetcherRegistry",
    "PackageFetcher",
    "default_registry",
]
