"""文档转换异常处理模块。

定义统一的异常类和错误处理机制，包含外部组件调用的异常转换装饰器。
"""

from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.conversion_result import ConversionResult
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class ConversionError(Exception):
    """转换相关错误基类"""

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ValidationError(ConversionError):
    """参数验证错误"""

    pass


class ProcessingError(ConversionError):
    """处理过程错误"""

    pass


class UnsupportedFormatError(ConversionError):
    """不支持的格式错误"""

    pass


class CodecUnavailableError(ProcessingError):
    """解析出的压缩模式没有可用的编码器"""

    pass


class NoPagesError(ProcessingError):
    """页面序列为空"""

    def __init__(self, input_path: Path | None = None):
        super().__init__("no pages to convert: 没有可转换的页面", input_path)


def handle_document_errors(operation_name: str = "文档处理"):
    """外部组件（光栅化器、解码器）调用的异常转换装饰器

    本项目自身的 ConversionError 原样透传，第三方库异常转换为对应的项目异常。

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except ConversionError:
                raise
            except UnidentifiedImageError as e:
                logger.error(f"{operation_name} - 无法识别图像格式: {e}")
                raise UnsupportedFormatError(f"不支持的图像格式: {e}") from e
            except DecompressionBombError as e:
                logger.error(f"{operation_name} - 图像过大: {e}")
                raise ProcessingError(f"图像尺寸过大，可能存在安全风险: {e}") from e
            except OSError as e:
                logger.error(f"{operation_name} - 读写失败: {e}")
                raise ProcessingError(f"读写失败: {e}") from e
            except (ValueError, TypeError) as e:
                logger.error(f"{operation_name} - 参数错误: {e}")
                raise ValidationError(f"参数错误: {e}") from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    仅用于服务边界：将异常转换为失败的 ConversionResult。
    """

    @staticmethod
    def _log_error(
        operation: str, path: Path | str, error: Exception, level: str = "error"
    ) -> None:
        """标准化的错误日志记录"""
        log_msg = MessageFormatter.format_error(operation, path, error)
        getattr(logger, level, logger.error)(log_msg)

    @staticmethod
    def create_error_result(output_format: str, error_msg: str) -> ConversionResult:
        """创建标准化的失败结果"""
        return ConversionResult(
            success=False,
            error=error_msg,
            output_format=output_format,
        )

    @staticmethod
    def handle_conversion_error(
        error: Exception,
        input_path: Path | str,
        output_format: str,
        operation: str = "文档转换",
    ) -> ConversionResult:
        """按异常类型记录日志并生成失败结果"""
        match error:
            case ValidationError() as ve:
                ErrorHandler._log_error("参数验证", input_path, ve, "warning")
                return ErrorHandler.create_error_result(
                    output_format, f"参数验证失败: {ve.message}"
                )
            case NoPagesError() | UnsupportedFormatError() | FileNotFoundError():
                ErrorHandler._log_error(operation, input_path, error, "warning")
            case PermissionError():
                operation = f"{operation} - 权限错误"
                ErrorHandler._log_error(operation, input_path, error)
            case _:
                ErrorHandler._log_error(operation, input_path, error)

        return ErrorHandler.create_error_result(output_format, f"{operation}: {error}")
