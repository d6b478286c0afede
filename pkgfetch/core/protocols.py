"""协作方协议定义

拉取编排器只依赖这里的抽象，解析器、报告器、拉取器均可替换。

使用 typing.Protocol 而非 ABC，使得现有类无需修改继承关系即可满足协议。
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Protocol

if TYPE_CHECKING:
    from pkgfetch.core.config import Config
    from pkgfetch.core.models import FetchedMetadata, Manifest, PackageReference, PackageRemote

# 进度回调：每完成一个引用调用一次，参数为包名
ProgressTick = Callable[[str], None]


# =========================================================================
# 解析器协议
# =========================================================================

class PackageResolver(Protocol):
    """已解析引用的提供者 + 清单回写钩子

    update_manifest 可能被多个 worker 线程并发调用（不同引用），
    实现方需自行保证其存储的线程安全。
    """

    def get_package_references(self) -> list[PackageReference]:
        ...

    def update_manifest(self, reference: PackageReference, manifest: Manifest) -> None:
        ...


# =========================================================================
# 报告器协议
# =========================================================================

class Reporter(Protocol):
    """进度与错误报告，返回 None 的 progress 表示不需要进度"""

    def progress(self, total: int) -> Optional[ProgressTick]:
        ...

    def error(self, message: str) -> None:
        ...


# =========================================================================
# 拉取策略协议
# =========================================================================

class FetchStrategy(Protocol):
    """单次拉取：把 remote 的内容完整写入 dest"""

    def fetch(self) -> FetchedMetadata:
        ...


# 拉取器构造函数: (dest, remote, config) -> FetchStrategy
FetcherFactory = Callable[[Path, "PackageRemote", "Config"], FetchStrategy]
