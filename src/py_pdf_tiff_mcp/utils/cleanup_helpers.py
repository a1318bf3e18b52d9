"""清理工具模块。

提供失败转换时的输出文件清理。
"""

from pathlib import Path
from typing import Any

from .logging_helpers import get_logger


logger = get_logger()


class OutputGuard:
    """输出文件守卫

    进入时记录目标文件是否已存在；若退出时发生异常且文件是本次调用新建的，
    则删除该文件，保证致命错误不会留下空的或不完整的输出。
    """

    def __init__(self, dest_path: str | Path):
        self.dest_path = Path(dest_path)
        self._existed = False

    def __enter__(self) -> "OutputGuard":
        self._existed = self.dest_path.exists()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        del exc_val, exc_tb
        if exc_type is None or self._existed:
            return

        try:
            if self.dest_path.exists():
                self.dest_path.unlink()
                logger.debug(f"已清理失败转换的输出文件: {self.dest_path}")
        except OSError as e:
            logger.warning(f"清理输出文件失败 {self.dest_path}: {e}")

