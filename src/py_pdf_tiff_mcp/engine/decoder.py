"""TIFF 帧解码模块。

逐帧读取栅格及其分辨率、方向元数据。
"""

from io import BytesIO

from PIL import Image, ImageSequence

from ..config import get_config
from ..core.normalizer import SWAPPING_ORIENTATIONS
from ..exceptions import UnsupportedFormatError, handle_document_errors
from ..models.constants import TiffTags
from ..models.page_image import PageImage
from ..utils.logging_helpers import get_logger


logger = get_logger()
config = get_config()


def read_resolution(tags, index: int) -> tuple[float, float]:
    """读取帧的分辨率（DPI）

    ResolutionUnit 为厘米时换算为英寸；缺失或非正值时使用默认分辨率。
    """
    fallback = config.conversion.FALLBACK_DPI
    unit = tags.get(TiffTags.RESOLUTION_UNIT, TiffTags.UNIT_INCH)
    scale = TiffTags.CM_PER_INCH if unit == TiffTags.UNIT_CENTIMETER else 1.0

    resolution: list[float] = []
    for tag, axis in ((TiffTags.X_RESOLUTION, "X"), (TiffTags.Y_RESOLUTION, "Y")):
        raw = tags.get(tag)
        try:
            value = float(raw) * scale if raw is not None else 0.0
        except (TypeError, ValueError, ZeroDivisionError):
            value = 0.0

        if value > 0:
            resolution.append(value)
        else:
            logger.warning(
                f"第 {index} 帧缺少有效的 {axis}Resolution，使用 {fallback} DPI"
            )
            resolution.append(fallback)

    return resolution[0], resolution[1]


def read_orientation(tags, index: int) -> int:
    orientation = tags.get(TiffTags.ORIENTATION, 1)
    if isinstance(orientation, int) and 1 <= orientation <= 8:
        return orientation

    logger.warning(f"第 {index} 帧方向码无效: {orientation}，按 1 处理")
    return 1


class TiffDecoder:
    """多帧 TIFF 解码器（Pillow）"""

    @handle_document_errors("TIFF 解码")
    def decode(self, data: bytes) -> list[PageImage]:
        """解码所有帧

        Returns:
            list[PageImage]: 按帧序排列的页面
        """
        pages: list[PageImage] = []
        with Image.open(BytesIO(data)) as img:
            if img.format != "TIFF":
                raise UnsupportedFormatError(f"输入不是 TIFF 文件: {img.format}")

            for index, frame in enumerate(ImageSequence.Iterator(img)):
                # 元数据须在加载像素之前读取
                tags = frame.tag_v2
                dpi_x, dpi_y = read_resolution(tags, index)
                orientation = read_orientation(tags, index)

                raster = frame.copy()
                if orientation != 1 and TiffTags.ORIENTATION not in frame.tag_v2:
                    # 较新的 Pillow 在加载时已按方向码转正并删除该标签
                    if orientation in SWAPPING_ORIENTATIONS:
                        dpi_x, dpi_y = dpi_y, dpi_x
                    orientation = 1

                pages.append(
                    PageImage(
                        image=raster,
                        dpi_x=dpi_x,
                        dpi_y=dpi_y,
                        orientation=orientation,
                        index=index,
                    )
                )
                logger.debug(
                    f"解码第 {index} 帧: {raster.width}x{raster.height} "
                    f"{frame.mode} @ {dpi_x:g}x{dpi_y:g} DPI"
                )

        logger.info(f"TIFF 解码完成: {len(pages)} 帧")
        return pages
