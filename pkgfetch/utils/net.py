"""来源定位串（locator）处理

remote.source 可能是 http(s) 地址、git 地址加 #ref、或本地路径。
下载前只放行 http/https，防止 file:// 等协议绕过本地路径分支。
"""

from __future__ import annotations

from urllib.parse import urlparse

from pkgfetch.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def is_remote_url(locator: str) -> bool:
    """locator 是否为 http/https 地址（否则按本地路径处理）"""
    return urlparse(locator).scheme in _ALLOWED_SCHEMES


def split_locator(locator: str) -> tuple[str, str]:
    """拆分 <location>#<fragment>，无 fragment 时返回空串"""
    location, _, fragment = locator.partition("#")
    return location, fragment


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """下载地址只允许 http/https

    Raises:
        ValidationError: 协议不在白名单内
    """
    scheme = urlparse(url).scheme
    if scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(f"不允许的 URL 协议 '{scheme}'{label}，仅支持 http/https: {url}")


def validate_location(location: str, *, context: str = "") -> None:
    """交给子进程的地址不能为空，也不能以 '-' 开头（会被当成命令行选项）"""
    label = f" ({context})" if context else ""
    if not location:
        raise ValidationError(f"来源缺少地址{label}")
    if location.startswith("-"):
        raise ValidationError(f"来源地址不能以 '-' 开头{label}: {location}")
