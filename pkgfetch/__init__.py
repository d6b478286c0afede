"""pkgfetch - 包管理器拉取阶段编排"""

__version__ = "0.1.0"
