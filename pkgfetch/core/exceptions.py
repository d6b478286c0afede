"""统一异常体系

所有业务异常继承 PkgFetchError，CLI 层据 code 输出友好提示。

拉取相关异常统一继承 FetchError，携带失败的包名与原始原因:
  - UnknownTransportError: 引用声明的传输类型没有注册拉取器（致命）
  - CacheReadError: 缓存目录看似有效但元数据无法解析（致命）
  - TransportFetchError: 拉取器自身失败（网络/解压/校验和），可选包可容忍
  - CleanupError: 失败后清理目录时的二次失败，只记录不抛出
"""

from __future__ import annotations


class PkgFetchError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigError(PkgFetchError):
    """配置文件或锁文件缺失、内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(PkgFetchError, ValueError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class FetchError(PkgFetchError):
    """单个包拉取失败"""

    code = "FETCH_ERROR"
    # 可选包遇到此类错误时是否可以跳过
    tolerable: bool = False

    def __init__(self, package: str, cause: BaseException | str) -> None:
        super().__init__(f"{package}: {cause}")
        self.package = package
        self.cause = cause
        self.secondary: CleanupError | None = None


class UnknownTransportError(FetchError):
    """传输类型未注册"""

    code = "UNKNOWN_TRANSPORT"

    def __init__(self, package: str, transport: str) -> None:
        super().__init__(package, f"未知的拉取器类型: {transport}")
        self.transport = transport


class CacheReadError(FetchError):
    """缓存元数据读取失败"""

    code = "CACHE_READ_ERROR"


class TransportFetchError(FetchError):
    """拉取器执行失败"""

    code = "TRANSPORT_FETCH_ERROR"
    tolerable = True


class CleanupError(FetchError):
    """失败后的目录清理失败"""

    code = "CLEANUP_ERROR"
