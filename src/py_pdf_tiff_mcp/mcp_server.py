"""PDF ⇄ TIFF 转换 MCP 服务器。

提供 PDF → TIFF、TIFF → PDF（支持尺寸上限控制）以及文档信息查询三个工具。
"""

from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from .config import get_config
from .converter import DocumentConverter
from .engine.config import ConfigBuilder
from .engine.inspector import inspect_document
from .exceptions import ErrorHandler, ValidationError
from .models import ConversionResult, DocumentFormats
from .utils.file_helpers import derive_output_path, ensure_input_file
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPConversionResponse = dict[str, Any]
MCPDocumentInfoResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def file_error(message: str, file_path: str | None = None) -> dict[str, Any]:
        """构建文件相关错误结果。"""
        details = {"file_path": file_path} if file_path else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="file",
            details=details,
        )

    @staticmethod
    def processing_error(message: str, operation: str | None = None) -> dict[str, Any]:
        """构建处理错误结果。"""
        details = {"operation": operation} if operation else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="processing",
            details=details,
        )

    @staticmethod
    def from_exception(
        error: Exception, input_path: str, output_format: str, operation: str
    ) -> dict[str, Any]:
        """按异常类型构建错误结果（同时记录日志）"""
        failed = ErrorHandler.handle_conversion_error(
            error, input_path, output_format, operation
        )
        match error:
            case ValidationError():
                return MCPResponseBuilder.validation_error(failed.error)
            case FileNotFoundError() | PermissionError():
                return MCPResponseBuilder.file_error(failed.error, input_path)
            case _:
                return MCPResponseBuilder.processing_error(failed.error, operation)


# 配置日志
app_config = get_config()
configure_logging(app_config.logging.LOG_LEVEL, app_config.logging.LOG_FORMAT)
logger = get_logger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("PDF/TIFF 文档转换服务")

# 全局转换器与配置构建器实例
converter = DocumentConverter()
config_builder = ConfigBuilder()


def _format_conversion_result(
    result: ConversionResult, input_path: Path, output_path: Path
) -> dict[str, Any]:
    """格式化转换结果为MCP响应格式"""
    formatted: dict[str, Any] = {
        "input_path": str(input_path),
        "output_path": str(output_path),
        "output_format": result.output_format,
        "output_size": result.output_size,
        "output_size_human": result.get_output_size_human(),
        "page_count": result.page_count,
        "summary": result.get_summary(),
        "pages": [
            {
                "index": page.index,
                "compression": page.resolved.value,
                "width": page.width,
                "height": page.height,
                "dpi": [page.dpi_x, page.dpi_y],
                "status": page.status.value,
            }
            for page in result.pages
        ],
        "diagnostics": [d.model_dump(mode="json") for d in result.diagnostics],
    }

    if result.max_file_size is not None:
        formatted["size_control"] = {
            "max_file_size": result.max_file_size,
            "within_budget": result.within_budget,
            "profile_index": result.profile_index,
            "state": result.search_state.value if result.search_state else None,
            "trials": [t.model_dump() for t in result.trials],
        }

    return formatted


def _run_conversion(
    target_format: str,
    input_path: str,
    output_path: str | None,
    profile_args: dict[str, Any],
    max_file_size: int | None,
    profiles: list[dict[str, Any]] | None,
    dpi: int | None = None,
) -> MCPConversionResponse:
    """两个转换工具共用的执行逻辑"""
    operation = f"转换为 {target_format}"
    try:
        source = ensure_input_file(input_path)
        dest = (
            Path(output_path)
            if output_path
            else derive_output_path(source, target_format)
        )
        profile_list = config_builder.build_profiles(profiles, **profile_args)

        if max_file_size is not None:
            plan = config_builder.build_plan(
                profile_list,
                max_file_size,
                source_path=source,
                dest_path=dest,
                render_dpi=dpi,
            )
            if target_format == DocumentFormats.TIFF:
                result = converter.pdf_to_tiff_with_size_control(plan)
            else:
                result = converter.tiff_to_pdf_with_size_control(plan)
        else:
            if len(profile_list) > 1:
                raise ValidationError("提供多组 profiles 时必须同时指定 max_file_size")
            if target_format == DocumentFormats.TIFF:
                result = converter.pdf_to_tiff_file(source, dest, profile_list[0], dpi)
            else:
                result = converter.tiff_to_pdf_file(source, dest, profile_list[0])

        return {
            "success": True,
            "result": _format_conversion_result(result, source, dest),
            "error": None,
        }

    except Exception as e:
        return MCPResponseBuilder.from_exception(e, input_path, target_format, operation)


# ============================================================================
# 转换工具
# ============================================================================


@mcp.tool()
def convert_pdf_to_tiff(
    input_path: str,
    output_path: str | None = None,
    dpi: int | None = None,
    compression: str = "auto",
    jpeg_quality: float | None = None,
    target_dpi: int | None = None,
    color_hint: str = "auto",
    max_file_size: int | None = None,
    profiles: list[dict[str, Any]] | None = None,
) -> MCPConversionResponse:
    """将 PDF 转换为多帧 TIFF。

    Args:
        input_path: 输入 PDF 路径
        output_path: 输出 TIFF 路径（可选，默认与输入同目录同名 .tiff）
        dpi: 光栅化分辨率（默认 300）
        compression: auto / jpeg / lossless / ccitt
        jpeg_quality: 有损质量因子 0.0-1.0
        target_dpi: 目标分辨率，低于光栅化分辨率时缩小
        color_hint: auto / rgb / gray / binary
        max_file_size: 输出字节上限；指定后按顺序尝试 profiles
        profiles: 有序的质量参数列表，每项包含上面四个参数

    使用场景:
        # 📄 默认参数转换
        convert_pdf_to_tiff("scan.pdf")

        # 📉 限制在 500KB 以内，先试高质量再逐级降低
        convert_pdf_to_tiff("scan.pdf", max_file_size=512000, profiles=[
            {"compression": "jpeg", "jpeg_quality": 0.9},
            {"compression": "jpeg", "jpeg_quality": 0.6, "target_dpi": 150},
            {"compression": "ccitt", "color_hint": "binary"},
        ])
    """
    return _run_conversion(
        DocumentFormats.TIFF,
        input_path,
        output_path,
        {
            "compression": compression,
            "jpeg_quality": jpeg_quality,
            "target_dpi": target_dpi,
            "color_hint": color_hint,
        },
        max_file_size,
        profiles,
        dpi=dpi,
    )


@mcp.tool()
def convert_tiff_to_pdf(
    input_path: str,
    output_path: str | None = None,
    compression: str = "auto",
    jpeg_quality: float | None = None,
    target_dpi: int | None = None,
    color_hint: str = "auto",
    max_file_size: int | None = None,
    profiles: list[dict[str, Any]] | None = None,
) -> MCPConversionResponse:
    """将 TIFF（单帧或多帧）转换为 PDF，每页物理尺寸由帧的分辨率决定。

    参数含义同 convert_pdf_to_tiff。
    """
    return _run_conversion(
        DocumentFormats.PDF,
        input_path,
        output_path,
        {
            "compression": compression,
            "jpeg_quality": jpeg_quality,
            "target_dpi": target_dpi,
            "color_hint": color_hint,
        },
        max_file_size,
        profiles,
    )


# ============================================================================
# 文档信息获取工具
# ============================================================================


@mcp.tool()
def get_document_info(input_path: str) -> MCPDocumentInfoResponse:
    """获取 PDF / TIFF 的页数以及每页的尺寸、分辨率信息。

    Args:
        input_path: 输入文件路径
    """
    try:
        source = ensure_input_file(input_path)
        info = inspect_document(source.read_bytes(), source)

        return {
            "success": True,
            "file_path": str(source),
            "file_size": info.file_size,
            "file_size_human": info.get_file_size_human(),
            "format": info.format,
            "page_count": info.page_count,
            "pages": [page.model_dump() for page in info.pages],
        }

    except FileNotFoundError as e:
        logger.warning(MessageFormatter.operation_failed("路径处理", input_path, e))
        return MCPResponseBuilder.file_error(str(e), input_path)
    except Exception as e:
        logger.error(MessageFormatter.operation_failed("获取文档信息", input_path, e))
        return MCPResponseBuilder.processing_error(str(e), "文档信息获取")


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    logger.info("启动 PDF/TIFF 转换 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
