"""并发调度器 - 有界并行地处理全部引用

- 同时在途的任务数不超过 max_workers
- 按完成顺序（而非输入顺序）发出进度
- 任一致命结果: 取消尚未开始的任务，等待在途任务结束后抛出
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

from pkgfetch.core.models import FetchOutcome, FetchSummary, PackageReference
from pkgfetch.core.protocols import ProgressTick

logger = logging.getLogger(__name__)

PerItem = Callable[[PackageReference], FetchOutcome]


class ConcurrencyScheduler:
    """可配置并行度的拉取调度器"""

    def __init__(self, max_workers: int = 8) -> None:
        self.max_workers = max(1, max_workers)

    def run(
        self,
        refs: Sequence[PackageReference],
        per_item: PerItem,
        tick: Optional[ProgressTick] = None,
    ) -> FetchSummary:
        summary = FetchSummary()
        if not refs:
            return summary

        workers = min(self.max_workers, len(refs))
        logger.info("开始拉取 %d 个包 (并发 %d)", len(refs), workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pkgfetch") as pool:
            futures: dict[Future[FetchOutcome], PackageReference] = {
                pool.submit(per_item, ref): ref for ref in refs
            }
            try:
                for future in as_completed(futures):
                    outcome = future.result()
                    if outcome.fatal and outcome.error is not None:
                        raise outcome.error
                    summary.record(outcome)
                    if tick:
                        tick(outcome.reference.name)
            except BaseException:
                cancelled = sum(1 for f in futures if f.cancel())
                logger.error("拉取中止，取消 %d 个未开始的任务", cancelled)
                raise
        return summary
