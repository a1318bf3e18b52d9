"""数据模型包。

定义页面、质量参数、尺寸控制计划及转换结果等数据结构。
"""

from .constants import (
    HAS_JPEG,
    HAS_LIBTIFF,
    PDF_CODECS,
    TIFF_CODECS,
    DocumentFormats,
    ResolutionDefaults,
    TiffTags,
)
from .conversion_result import (
    BaseResult,
    ConversionResult,
    Diagnostic,
    EncodedFrame,
    EncodeOutcome,
    EncodeStatus,
    PageReport,
    SearchState,
    TrialRecord,
)
from .document_info import DocumentInfo, PageInfo
from .page_image import PageImage
from .quality_profile import ColorHint, Compression, QualityProfile
from .size_control import SizeControlPlan


__all__ = [
    "HAS_JPEG",
    "HAS_LIBTIFF",
    "PDF_CODECS",
    "TIFF_CODECS",
    "BaseResult",
    "ColorHint",
    "Compression",
    "ConversionResult",
    "Diagnostic",
    "DocumentInfo",
    "DocumentFormats",
    "EncodeOutcome",
    "EncodeStatus",
    "EncodedFrame",
    "PageImage",
    "PageInfo",
    "PageReport",
    "QualityProfile",
    "ResolutionDefaults",
    "SearchState",
    "SizeControlPlan",
    "TiffTags",
    "TrialRecord",
]
