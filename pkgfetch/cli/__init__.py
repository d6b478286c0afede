"""pkgfetch 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

import os

import click

from pkgfetch import __version__
from pkgfetch.core.config import init_config
from pkgfetch.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default="configs/pkgfetch.yml", help="配置文件路径")
def main(config_path: str) -> None:
    """pkgfetch - 把已解析的包引用落盘到本地缓存"""
    setup_logging(
        level=os.getenv("PKGFETCH_LOG_LEVEL", "WARNING"),
        json_output=os.getenv("PKGFETCH_LOG_JSON", "") == "1",
    )
    init_config(config_path)


# 注册各领域子命令
from pkgfetch.cli.cmd_fetch import register as _reg_fetch  # noqa: E402

_reg_fetch(main)
