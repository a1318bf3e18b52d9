"""文件与流工具模块。

提供输入读取、输出提交以及文档格式识别等与业务无关的工具函数。
"""

from pathlib import Path
from typing import BinaryIO

from ..models.constants import DocumentFormats
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def read_all(source: BinaryIO) -> bytes:
    """一次性读取输入流的全部内容"""
    data = source.read()
    if not isinstance(data, bytes | bytearray):
        raise TypeError(f"输入流必须为二进制流，得到: {type(data).__name__}")
    return bytes(data)


def write_all(data: bytes, dest: BinaryIO) -> int:
    """将缓冲区内容写入输出流并刷新"""
    written = dest.write(data)
    flush = getattr(dest, "flush", None)
    if callable(flush):
        flush()
    return written if written is not None else len(data)


def detect_document_format(data: bytes) -> str | None:
    """根据文件头识别文档格式

    Returns:
        str | None: "PDF"、"TIFF"，无法识别时返回 None
    """
    if data.startswith(DocumentFormats.PDF_MAGIC):
        return DocumentFormats.PDF
    if any(data.startswith(magic) for magic in DocumentFormats.TIFF_MAGICS):
        return DocumentFormats.TIFF
    return None


def derive_output_path(input_path: str | Path, target_format: str) -> Path:
    """为转换结果生成同目录下的输出路径

    Args:
        input_path: 输入文件路径
        target_format: 目标格式 ("PDF" / "TIFF")

    Returns:
        Path: 输出路径，与输入同名时追加 _converted 后缀
    """
    input_path = Path(input_path)
    extension = DocumentFormats.get_extension(target_format)
    output_path = input_path.with_suffix(extension)

    if output_path == input_path:
        output_path = input_path.with_name(f"{input_path.stem}_converted{extension}")

    logger.debug(f"自动生成输出路径: {output_path}")
    return output_path


def ensure_input_file(path: str | Path) -> Path:
    """校验输入路径存在且为文件"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(MessageFormatter.file_not_found(path))
    if not path.is_file():
        raise FileNotFoundError(MessageFormatter.path_not_file(path))
    return path
