"""文档处理引擎模块。

包含 PDF 光栅化、TIFF 解码、两种容器写入器以及配置构建。
"""

from .config import ConfigBuilder
from .decoder import TiffDecoder
from .inspector import inspect_document
from .pdf_writer import PdfContainerWriter
from .rasterizer import PdfRasterizer
from .tiff_writer import TiffContainerWriter
from .writer_base import ContainerWriter


__all__ = [
    "ConfigBuilder",
    "ContainerWriter",
    "PdfContainerWriter",
    "PdfRasterizer",
    "TiffContainerWriter",
    "TiffDecoder",
    "inspect_document",
]
