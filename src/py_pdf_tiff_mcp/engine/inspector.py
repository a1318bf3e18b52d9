"""文档信息提取模块。

读取 PDF / TIFF 的页数与每页的尺寸、分辨率信息，不做任何转换。
"""

from io import BytesIO
from pathlib import Path

import pymupdf
from PIL import Image, ImageSequence

from ..exceptions import UnsupportedFormatError, handle_document_errors
from ..models.constants import DocumentFormats, ResolutionDefaults
from ..models.document_info import DocumentInfo, PageInfo
from ..utils.file_helpers import detect_document_format
from .decoder import read_orientation, read_resolution


def _inspect_pdf(data: bytes) -> list[PageInfo]:
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except pymupdf.FileDataError as e:
        raise UnsupportedFormatError(f"无法解析 PDF: {e}") from e

    pages: list[PageInfo] = []
    with doc:
        for page in doc:
            rect = page.rect
            pages.append(
                PageInfo(
                    index=page.number,
                    width=rect.width,
                    height=rect.height,
                    width_inches=rect.width / ResolutionDefaults.POINTS_PER_INCH,
                    height_inches=rect.height / ResolutionDefaults.POINTS_PER_INCH,
                )
            )
    return pages


def _inspect_tiff(data: bytes) -> list[PageInfo]:
    pages: list[PageInfo] = []
    with Image.open(BytesIO(data)) as img:
        for index, frame in enumerate(ImageSequence.Iterator(img)):
            tags = frame.tag_v2
            dpi_x, dpi_y = read_resolution(tags, index)
            width, height = frame.size
            orientation = read_orientation(tags, index)
            if orientation >= 5:
                width, height = height, width
                dpi_x, dpi_y = dpi_y, dpi_x
            pages.append(
                PageInfo(
                    index=index,
                    width=width,
                    height=height,
                    dpi_x=dpi_x,
                    dpi_y=dpi_y,
                    mode=frame.mode,
                    compression=frame.info.get("compression"),
                    orientation=orientation,
                    width_inches=width / dpi_x,
                    height_inches=height / dpi_y,
                )
            )
    return pages


@handle_document_errors("文档信息提取")
def inspect_document(data: bytes, file_path: Path | None = None) -> DocumentInfo:
    """提取文档信息

    Args:
        data: 文档字节
        file_path: 来源路径，仅用于记录

    Raises:
        UnsupportedFormatError: 既不是 PDF 也不是 TIFF
    """
    match detect_document_format(data):
        case DocumentFormats.PDF:
            format_name, pages = DocumentFormats.PDF, _inspect_pdf(data)
        case DocumentFormats.TIFF:
            format_name, pages = DocumentFormats.TIFF, _inspect_tiff(data)
        case _:
            raise UnsupportedFormatError("无法识别的文档格式，仅支持 PDF 与 TIFF", file_path)

    return DocumentInfo(
        file_path=file_path, file_size=len(data), format=format_name, pages=pages
    )
