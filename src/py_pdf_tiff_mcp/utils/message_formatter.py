"""消息格式化工具模块。

提供统一的错误消息、转换摘要格式化功能。
"""

from pathlib import Path

from humanize import naturalsize


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: str | Path) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def path_not_file(path: str | Path) -> str:
        """路径不是文件错误消息"""
        return f"路径不是文件: {path}"

    @staticmethod
    def operation_failed(
        operation: str, target: str | Path, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def format_error(operation: str, path: str | Path, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{path}]: {error}"

    @staticmethod
    def compression_fallback(
        page_index: int, requested: str, substituted: str, reason: str
    ) -> str:
        """压缩模式回退消息"""
        return (
            f"第 {page_index} 页: 请求的压缩模式 {requested} 不可用，"
            f"改用 {substituted} ({reason})"
        )

    @staticmethod
    def trial_size(attempt: int, total: int, size: int, limit: int) -> str:
        """尺寸控制单次尝试结果消息"""
        return (
            f"尝试 {attempt}/{total}: 输出 {naturalsize(size, binary=True)} "
            f"(上限 {naturalsize(limit, binary=True)})"
        )
