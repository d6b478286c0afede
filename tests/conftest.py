"""共享 fixture - 引用构造、桩拉取器、预置缓存"""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from pkgfetch.core.config import Config
from pkgfetch.core.fetch.cache import CacheGate, write_metadata
from pkgfetch.core.fetch.fetchers.base import BaseFetcher
from pkgfetch.core.fetch.registry import FetcherRegistry
from pkgfetch.core.models import PackageReference, PackageRemote


class ConcurrencyTracker:
    """记录同时处于拉取阶段的最大任务数"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.current = 0
        self.peak = 0
        self.calls: list[str] = []

    def enter(self, name: str) -> None:
        with self._lock:
            self.current += 1
            self.peak = max(self.peak, self.current)
            self.calls.append(name)

    def exit(self) -> None:
        with self._lock:
            self.current -= 1


class RecordingResolver:
    """记录 update_manifest 调用的解析器"""

    def __init__(self, refs: list[PackageReference] | None = None) -> None:
        self.refs = refs or []
        self.updates: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get_package_references(self) -> list[PackageReference]:
        return self.refs

    def update_manifest(self, reference: PackageReference, manifest: dict[str, Any]) -> None:
        with self._lock:
            self.updates[reference.name] = manifest


def make_stub_fetcher(
    *,
    hash_: str = "fresh-hash",
    resolved: str | None = "https://example.com/pkg.tgz#fresh-hash",
    files: dict[str, str] | None = None,
    error: Exception | None = None,
    delay: float = 0.0,
    tracker: ConcurrencyTracker | None = None,
) -> type[BaseFetcher]:
    """生成一个桩拉取器类：写入清单和文件，可选延迟 / 失败"""

    class StubFetcher(BaseFetcher):
        def _fetch_into_dest(self) -> tuple[str, str | None]:
            if tracker:
                tracker.enter(self.remote.source)
            try:
                name = self.remote.source.rsplit("/", 1)[-1]
                (self.dest / "package.yml").write_text(
                    yaml.safe_dump({"name": name, "version": "1.0.0"}), encoding="utf-8",
                )
                for rel, content in (files or {}).items():
                    target = self.dest / rel
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_text(content, encoding="utf-8")
                if delay:
                    time.sleep(delay)
                if error is not None:
                    raise error
                return hash_, resolved
            finally:
                if tracker:
                    tracker.exit()

    return StubFetcher


@pytest.fixture()
def config(tmp_path: Path) -> Config:
    return Config(cache_dir=str(tmp_path / "cache"), network_concurrency=4)


@pytest.fixture()
def gate(config: Config) -> CacheGate:
    return CacheGate(config.cache_dir, config.manifest_filenames)


@pytest.fixture()
def make_ref() -> Callable[..., PackageReference]:
    def _make(
        name: str = "left-pad",
        *,
        version: str = "1.3.0",
        transport: str = "stub",
        optional: bool = False,
        resolved: str | None = None,
        hash_: str | None = None,
    ) -> PackageReference:
        return PackageReference(
            name=name,
            version=version,
            optional=optional,
            remote=PackageRemote(
                type=transport,
                source=f"https://registry.example.com/{name}",
                resolved=resolved,
                hash=hash_,
            ),
        )

    return _make


@pytest.fixture()
def populate_cache(gate: CacheGate) -> Callable[..., Path]:
    """在引用的落盘目录预置一份有效缓存"""

    def _populate(ref: PackageReference, *, hash_: str = "cached-hash") -> Path:
        dest = gate.destination(ref)
        dest.mkdir(parents=True)
        (dest / "package.yml").write_text(
            yaml.safe_dump({"name": ref.name, "version": ref.version}), encoding="utf-8",
        )
        write_metadata(dest, hash_, ref.remote)
        return dest

    return _populate


@pytest.fixture()
def stub_registry() -> FetcherRegistry:
    return FetcherRegistry({"stub": make_stub_fetcher()})


@pytest.fixture()
def stub_fetcher() -> Callable[..., type[BaseFetcher]]:
    return make_stub_fetcher


@pytest.fixture()
def tracker() -> ConcurrencyTracker:
    return ConcurrencyTracker()


@pytest.fixture()
def resolver() -> RecordingResolver:
    return RecordingResolver()
