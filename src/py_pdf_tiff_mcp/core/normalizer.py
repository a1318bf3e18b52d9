"""方向与分辨率归一化模块。

按 TIFF/EXIF 方向码把页面转正，并按目标分辨率缩小像素尺寸。
两个操作都返回新的 PageImage，不修改输入。
"""

from PIL import Image

from ..models.page_image import PageImage


# 方向码 → Pillow 变换；1 为恒等
_ORIENTATION_TRANSPOSE: dict[int, Image.Transpose] = {
    2: Image.Transpose.FLIP_LEFT_RIGHT,
    3: Image.Transpose.ROTATE_180,
    4: Image.Transpose.FLIP_TOP_BOTTOM,
    5: Image.Transpose.TRANSPOSE,
    6: Image.Transpose.ROTATE_270,
    7: Image.Transpose.TRANSVERSE,
    8: Image.Transpose.ROTATE_90,
}

# 5-8 交换宽高
SWAPPING_ORIENTATIONS = frozenset({5, 6, 7, 8})

RESAMPLE_FILTER = Image.Resampling.LANCZOS


def normalize(page: PageImage) -> PageImage:
    """将页面转正（方向码归一为 1）

    方向码 5-8 会交换宽高，同时交换水平/垂直分辨率以保持物理尺寸。

    Args:
        page: 输入页面

    Returns:
        PageImage: 方向码为 1 的新页面
    """
    method = _ORIENTATION_TRANSPOSE.get(page.orientation)
    if method is None:
        return page

    upright = page.image.transpose(method)
    if page.orientation in SWAPPING_ORIENTATIONS:
        return page.derive(
            upright, orientation=1, dpi_x=page.dpi_y, dpi_y=page.dpi_x
        )
    return page.derive(upright, orientation=1)


def _scaled_axis(pixels: int, dpi: float, target_dpi: int | None) -> tuple[int, float]:
    if target_dpi is None or target_dpi >= dpi:
        return pixels, dpi
    return max(1, round(pixels * target_dpi / dpi)), float(target_dpi)


def rescale(page: PageImage, target_dpi: int | None) -> PageImage:
    """按目标分辨率缩小页面

    目标分辨率缺失或不低于源分辨率时原样返回；只缩小，从不放大。
    每个轴独立计算，像素数 / DPI 在舍入误差内保持不变。
    """
    width, dpi_x = _scaled_axis(page.width, page.dpi_x, target_dpi)
    height, dpi_y = _scaled_axis(page.height, page.dpi_y, target_dpi)

    if (width, height) == page.size:
        return page

    resized = page.image.resize((width, height), RESAMPLE_FILTER)
    return page.derive(resized, dpi_x=dpi_x, dpi_y=dpi_y)
