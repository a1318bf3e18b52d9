"""PDF 光栅化模块（PyMuPDF）。

在内存中渲染，不依赖外部程序。
"""

import pymupdf
from PIL import Image

from ..config import get_config
from ..exceptions import UnsupportedFormatError, handle_document_errors
from ..models.page_image import PageImage
from ..utils.logging_helpers import get_logger


logger = get_logger()
config = get_config()


class PdfRasterizer:
    """将 PDF 的每一页渲染为 PageImage"""

    @handle_document_errors("PDF 光栅化")
    def rasterize(self, data: bytes, dpi: int | None = None) -> list[PageImage]:
        """按给定分辨率渲染所有页面

        Args:
            data: PDF 字节
            dpi: 渲染分辨率，None 使用配置默认值，超出范围时被限制

        Returns:
            list[PageImage]: 按页序排列的页面，分辨率均为渲染分辨率
        """
        defaults = config.conversion
        dpi = defaults.clamp_render_dpi(dpi or defaults.RENDER_DPI)

        try:
            doc = pymupdf.open(stream=data, filetype="pdf")
        except pymupdf.FileDataError as e:
            raise UnsupportedFormatError(f"无法解析 PDF: {e}") from e

        # 72 DPI 是 PDF 用户空间的默认分辨率
        zoom = dpi / 72.0
        matrix = pymupdf.Matrix(zoom, zoom)

        pages: list[PageImage] = []
        with doc:
            for page in doc:
                pixmap = page.get_pixmap(
                    matrix=matrix, colorspace=pymupdf.csRGB, alpha=False
                )
                img = Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)
                pages.append(
                    PageImage(image=img, dpi_x=dpi, dpi_y=dpi, index=page.number)
                )
                logger.debug(
                    f"光栅化第 {page.number} 页: {pixmap.width}x{pixmap.height} @ {dpi} DPI"
                )

        logger.info(f"PDF 光栅化完成: {len(pages)} 页 @ {dpi} DPI")
        return pages
