"""工具模块包。

提供纯工具函数，不包含业务逻辑。
"""

from .cleanup_helpers import OutputGuard
from .file_helpers import (
    derive_output_path,
    detect_document_format,
    ensure_input_file,
    read_all,
    write_all,
)
from .logging_helpers import configure_logging, get_logger
from .message_formatter import MessageFormatter


__all__ = [
    "MessageFormatter",
    "OutputGuard",
    "configure_logging",
    "derive_output_path",
    "detect_document_format",
    "ensure_input_file",
    "get_logger",
    "read_all",
    "write_all",
]
