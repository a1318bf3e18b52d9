"""PDF ⇄ TIFF 自适应转换库。

支持逐页压缩模式解析与回退，以及按输出字节上限搜索质量参数。
"""

__version__ = "0.1.0"
__description__ = "PDF 与 TIFF 互转，支持尺寸上限控制"

from .converter import (
    DocumentConverter,
    convert_with_size_control,
    pdf_to_tiff,
    tiff_to_pdf,
)
from .exceptions import (
    CodecUnavailableError,
    ConversionError,
    NoPagesError,
    ProcessingError,
    UnsupportedFormatError,
    ValidationError,
)
from .models import (
    ColorHint,
    Compression,
    ConversionResult,
    PageImage,
    QualityProfile,
    SizeControlPlan,
)


__all__ = [
    "CodecUnavailableError",
    "ColorHint",
    "Compression",
    "ConversionError",
    "ConversionResult",
    "DocumentConverter",
    "NoPagesError",
    "PageImage",
    "ProcessingError",
    "QualityProfile",
    "SizeControlPlan",
    "UnsupportedFormatError",
    "ValidationError",
    "convert_with_size_control",
    "get_version",
    "pdf_to_tiff",
    "tiff_to_pdf",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
