"""核心数据模型

包引用、拉取结果、单任务结果集中定义，
resolver / fetch / cli 各层统一从此处导入。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pkgfetch.core.exceptions import FetchError

# 包清单（package.yml / package.json 解析结果）
Manifest = dict[str, Any]


@dataclass
class PackageRemote:
    """包的远程来源描述

    拉取成功后由编排器回写 hash / resolved，其余字段只读。
    """

    type: str  # "tarball", "git", "file", "link"
    source: str
    resolved: str | None = None
    hash: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"type": self.type, "source": self.source}
        if self.resolved:
            data["resolved"] = self.resolved
        if self.hash:
            data["hash"] = self.hash
        return data


@dataclass
class PackageReference:
    """一个待落盘的已解析包"""

    name: str
    version: str
    remote: PackageRemote
    optional: bool = False

    @property
    def uid(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass
class FetchedMetadata:
    """单次拉取（或缓存命中）的结果

    缓存命中时 cached 为 True 且 resolved 为 None；
    新拉取的 resolved 也可能为 None，是否命中只看 cached。
    """

    package: Manifest
    resolved: str | None
    hash: str
    dest: Path
    cached: bool = False


class FetchStatus(str, Enum):
    DONE = "done"
    TOLERATED = "tolerated"
    FATAL = "fatal"


@dataclass
class FetchOutcome:
    """单个引用的任务结果，跨线程边界时以值返回而非抛异常"""

    reference: PackageReference
    status: FetchStatus
    metadata: FetchedMetadata | None = None
    error: FetchError | None = None

    @property
    def fatal(self) -> bool:
        return self.status is FetchStatus.FATAL

    @property
    def cached(self) -> bool:
        return self.metadata is not None and self.metadata.cached

    @classmethod
    def done(cls, reference: PackageReference, metadata: FetchedMetadata) -> FetchOutcome:
        return cls(reference=reference, status=FetchStatus.DONE, metadata=metadata)


@dataclass
class FetchSummary:
    """一次拉取阶段的汇总"""

    fetched: list[str] = field(default_factory=list)
    cached: list[str] = field(default_factory=list)
    tolerated: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.fetched) + len(self.cached) + len(self.tolerated)

    def record(self, outcome: FetchOutcome) -> None:
        name = outcome.reference.name
        if outcome.status is FetchStatus.TOLERATED:
            self.tolerated.append(name)
        elif outcome.cached:
            self.cached.append(name)
        else:
            self.fetched.append(name)
