"""日志工具模块。

统一获取模块日志记录器，并提供服务入口使用的日志初始化。
"""

import inspect
import logging


def get_logger(name: str | None = None) -> logging.Logger:
    """获取日志记录器。

    Args:
        name: 日志记录器名称，默认使用调用模块的 __name__

    Returns:
        logging.Logger: 日志记录器
    """
    if name is None:
        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")
        else:
            name = "unknown"

    return logging.getLogger(name)


def configure_logging(level: str = "INFO", fmt: str | None = None) -> None:
    """初始化根日志配置（仅服务入口调用，库代码不应调用）"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=fmt or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # PyMuPDF / pikepdf 的调试输出过多
    logging.getLogger("pikepdf").setLevel(logging.WARNING)
