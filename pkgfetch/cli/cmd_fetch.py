"""CLI - 拉取相关命令"""

from __future__ import annotations

import click

from pkgfetch.core.config import Config, get_config
from pkgfetch.core.exceptions import FetchError, PkgFetchError
from pkgfetch.core.models import PackageReference
from pkgfetch.core.resolver import LockfileResolver


def register(group: click.Group) -> None:
    group.add_command(fetch)
    group.add_command(list_refs)
    group.add_command(status)


def _effective_config(cache_dir: str | None, concurrency: int | None) -> Config:
    cfg = get_config()
    if cache_dir:
        cfg.cache_dir = cache_dir
    if concurrency is not None:
        cfg.network_concurrency = max(1, concurrency)
    return cfg


@click.command()
@click.option("--lockfile", default=None, help="锁文件路径（默认取配置 lockfile）")
@click.option("--cache-dir", default=None, help="缓存目录（覆盖配置）")
@click.option("--concurrency", "-j", type=int, default=None, help="并发拉取数（覆盖配置）")
@click.option("--no-save", is_flag=True, help="不把 hash / resolved 写回锁文件")
@click.option("--quiet", "-q", is_flag=True, help="不输出进度")
def fetch(
    lockfile: str | None, cache_dir: str | None,
    concurrency: int | None, no_save: bool, quiet: bool,
) -> None:
    """拉取锁文件中的全部包（缓存命中则跳过）"""
    from pkgfetch.core.fetch import PackageFetcher
    from pkgfetch.core.reporter import ConsoleReporter

    cfg = _effective_config(cache_dir, concurrency)
    try:
        resolver = LockfileResolver(lockfile or cfg.lockfile)
        fetcher = PackageFetcher(cfg, resolver, reporter=ConsoleReporter(quiet=quiet))
        summary = fetcher.init()
        if not no_save:
            resolver.save()
    except FetchError as e:
        click.secho(f"拉取失败 [{e.code}] {e.message}", fg="red", err=True)
        if e.secondary is not None:
            click.echo(f"  (清理时另有错误: {e.secondary.message})", err=True)
        raise SystemExit(1) from e
    except PkgFetchError as e:
        click.secho(f"错误 [{e.code}] {e.message}", fg="red", err=True)
        raise SystemExit(1) from e

    click.echo(
        f"完成: {len(summary.fetched)} 新拉取, {len(summary.cached)} 缓存命中, "
        f"{len(summary.tolerated)} 已跳过"
    )


def _load_references(lockfile: str) -> list[PackageReference]:
    try:
        return LockfileResolver(lockfile).get_package_references()
    except PkgFetchError as e:
        click.secho(f"错误 [{e.code}] {e.message}", fg="red", err=True)
        raise SystemExit(1) from e


@click.command(name="refs")
@click.option("--lockfile", default=None, help="锁文件路径")
def list_refs(lockfile: str | None) -> None:
    """列出锁文件中的包引用"""
    refs = _load_references(lockfile or get_config().lockfile)
    if not refs:
        click.echo("锁文件中没有包引用。")
        return
    for ref in refs:
        flag = " (optional)" if ref.optional else ""
        click.echo(f"  {ref.name:24s} {ref.version:12s} [{ref.remote.type:7s}] {ref.remote.source}{flag}")


@click.command()
@click.option("--lockfile", default=None, help="锁文件路径")
@click.option("--cache-dir", default=None, help="缓存目录（覆盖配置）")
def status(lockfile: str | None, cache_dir: str | None) -> None:
    """显示每个引用的落盘目录及缓存是否有效"""
    from pkgfetch.core.fetch import CacheGate

    cfg = _effective_config(cache_dir, None)
    gate = CacheGate(cfg.cache_dir, cfg.manifest_filenames)
    for ref in _load_references(lockfile or cfg.lockfile):
        dest = gate.destination(ref)
        state = "cached" if gate.is_valid(dest) else "missing"
        click.echo(f"  {ref.uid:32s} {state:8s} {dest}")
