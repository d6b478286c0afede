"""锁文件 / 配置文件的 YAML 读写

读写失败统一转换为 ConfigError（带文件种类和路径），CLI 据 code 输出提示，
不会把 yaml.YAMLError / OSError 原样抛到命令行。
锁文件回写和缓存完成标记都走 atomic_write，读者只会看到旧内容或完整新内容。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from pkgfetch.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 锁文件上限 (10MB)，超过基本可以肯定是误指向了别的文件
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """先写同目录临时文件再 os.replace

    异常:
        OSError: 写入或替换失败（临时文件已清理）
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError as e:
            logger.debug("临时文件清理失败: %s (%s)", tmp, e)
        raise


def load_yaml(path: str | Path, *, kind: str = "YAML 文件") -> dict[str, Any]:
    """读取顶层为映射的 YAML 文件

    文件不存在或为空返回空字典（首次运行没有锁文件是正常情况）。

    异常:
        ConfigError: 文件过大、无法读取、语法错误，或顶层不是映射
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"{kind}过大: {p} ({size} 字节, 上限 {MAX_YAML_SIZE})")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"{kind}解析失败: {p}: {e}") from e
    except OSError as e:
        raise ConfigError(f"{kind}读取失败: {p}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{kind}顶层必须是映射: {p} (实际为 {type(data).__name__})")
    return data


def save_yaml(path: str | Path, data: Any, *, kind: str = "YAML 文件") -> None:
    """原子写回，保持键顺序（锁文件里包的顺序不被打乱）

    异常:
        ConfigError: 序列化或写入失败，原文件保持不变
    """
    p = Path(path)
    try:
        content = yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False)
        atomic_write(p, content)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"{kind}写入失败: {p}: {e}") from e
    logger.debug("%s已写入: %s", kind, p)
