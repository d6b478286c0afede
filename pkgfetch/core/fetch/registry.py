"""拉取器注册表

传输类型 → 拉取器构造函数的映射。进程启动时一次性填充，之后只读，
多线程并发 lookup 无需加锁。
"""

from __future__ import annotations

import logging
from typing import Callable

from pkgfetch.core.exceptions import UnknownTransportError, ValidationError
from pkgfetch.core.protocols import FetcherFactory

logger = logging.getLogger(__name__)


class FetcherRegistry:
    """传输类型注册表

    用法:
        registry = FetcherRegistry()

        @registry.registered("tarball")
        class TarballFetcher(BaseFetcher):
            ...

        factory = registry.lookup("tarball")
    """

    def __init__(self, fetchers: dict[str, FetcherFactory] | None = None) -> None:
        self._fetchers: dict[str, FetcherFactory] = dict(fetchers or {})

    def register(self, transport: str, factory: FetcherFactory) -> None:
        if not transport:
            raise ValidationError("传输类型不能为空")
        if transport in self._fetchers:
            raise ValidationError(f"传输类型重复注册: {transport}")
        self._fetchers[transport] = factory
        logger.debug("已注册拉取器: %s -> %s", transport, getattr(factory, "__name__", factory))

    def registered(self, transport: str) -> Callable[[FetcherFactory], FetcherFactory]:
        """类装饰器形式的 register"""

        def decorator(factory: FetcherFactory) -> FetcherFactory:
            self.register(transport, factory)
            return factory

        return decorator

    def lookup(self, transport: str, *, package: str = "") -> FetcherFactory:
        """按传输类型查找拉取器，未注册时抛 UnknownTransportError"""
        factory = self._fetchers.get(transport)
        if factory is None:
            raise UnknownTransportError(package or "<unknown>", transport)
        return factory

    def transports(self) -> list[str]:
        return sorted(self._fetchers)

    def __contains__(self, transport: object) -> bool:
        return transport in self._fetchers


_default: FetcherRegistry | None = None


def default_registry() -> FetcherRegistry:
    """内置传输类型（tarball / git / file / link）的注册表"""
    global _default  # noqa: PLW0603
    if _default is None:
        from pkgfetch.core.fetch.fetchers import BUILTIN_FETCHERS
        _default = FetcherRegistry(BUILTIN_FETCHERS)
    return _default
