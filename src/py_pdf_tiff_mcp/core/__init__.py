"""核心模块包。

页面归一化、颜色处理、压缩模式解析、单页编码与尺寸控制搜索。
"""

from .color import ColorKind, apply_color_hint, classify, prepare_for_jpeg
from .normalizer import normalize, rescale
from .page_encoder import EncodedDocument, PageEncoder, encode_document
from .resolver import CompressionDecision, CompressionResolver
from .size_control import SearchOutcome, SizeControlSearch


__all__ = [
    "ColorKind",
    "CompressionDecision",
    "CompressionResolver",
    "EncodedDocument",
    "PageEncoder",
    "SearchOutcome",
    "SizeControlSearch",
    "apply_color_hint",
    "classify",
    "encode_document",
    "normalize",
    "prepare_for_jpeg",
    "rescale",
]
