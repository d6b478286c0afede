"""拉取进度报告器

- NullReporter: 不输出任何内容（库调用默认）
- LoggingReporter: 走标准 logging
- ConsoleReporter: CLI 使用，进度与警告输出到 stderr
"""

from __future__ import annotations

import logging
from typing import Optional

import click

from pkgfetch.core.protocols import ProgressTick

logger = logging.getLogger(__name__)


class NullReporter:
    """空报告器"""

    def progress(self, total: int) -> Optional[ProgressTick]:
        return None

    def error(self, message: str) -> None:
        pass


class LoggingReporter:
    """基于 logging 的报告器，可选包失败记为 WARNING"""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self.errors: list[str] = []

    def progress(self, total: int) -> Optional[ProgressTick]:
        if total <= 0:
            return None
        done = 0

        def tick(name: str) -> None:
            nonlocal done
            done += 1
            self._log.info("[%d/%d] %s", done, total, name)

        return tick

    def error(self, message: str) -> None:
        self.errors.append(message)
        self._log.warning("可选包拉取失败，已跳过: %s", message)


class ConsoleReporter:
    """终端报告器"""

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def progress(self, total: int) -> Optional[ProgressTick]:
        if self.quiet or total <= 0:
            return None
        done = 0

        def tick(name: str) -> None:
            nonlocal done
            done += 1
            click.echo(f"[{done}/{total}] {name}", err=True)

        return tick

    def error(self, message: str) -> None:
        click.secho(f"警告: {message}", fg="yellow", err=True)
