"""颜色特征与颜色转换模块。"""

from enum import Enum

from PIL import Image

from ..models.quality_profile import ColorHint


class ColorKind(str, Enum):
    """栅格颜色特征"""

    BINARY = "binary"  # 严格 1-bit
    INDEXED = "indexed"  # 调色板
    GRAY = "gray"
    RGB = "rgb"

    @property
    def is_continuous_tone(self) -> bool:
        return self in (ColorKind.GRAY, ColorKind.RGB)


_HIGH_DEPTH_GRAY = frozenset({"I", "I;16", "I;16B", "I;16L", "I;16N", "F"})
_GRAY_MODES = frozenset({"L", "LA"}) | _HIGH_DEPTH_GRAY


def classify(img: Image.Image) -> ColorKind:
    """按 Pillow 模式判断颜色特征"""
    match img.mode:
        case "1":
            return ColorKind.BINARY
        case "P" | "PA":
            return ColorKind.INDEXED
        case mode if mode in _GRAY_MODES:
            return ColorKind.GRAY
        case _:
            return ColorKind.RGB


def _to_gray8(img: Image.Image) -> Image.Image:
    """高位深灰度 → L

    16-bit 按位深缩放；I / F 超出 0-255 时按实际取值范围线性拉伸，不截断。
    """
    if img.mode.startswith("I;16"):
        img = img.convert("I").point(lambda v: v / 257)
    elif img.mode in ("I", "F"):
        low, high = img.getextrema()
        if low < 0 or high > 255:
            span = (high - low) or 1
            img = img.point(lambda v: (v - low) * 255 / span)
    return img.convert("L")


def _flatten_alpha(img: Image.Image) -> Image.Image:
    """将带透明度的图像合成到白色背景"""
    if img.mode == "P" and "transparency" not in img.info:
        return img.convert("RGB")

    rgba = img.convert("RGBA")
    background = Image.new("RGB", img.size, (255, 255, 255))
    background.paste(rgba, mask=rgba.split()[-1])
    return background


def apply_color_hint(img: Image.Image, hint: ColorHint) -> Image.Image:
    """按颜色提示转换栅格

    BINARY 使用固定阈值，不做抖动，保证同一输入得到相同输出。
    """
    match hint:
        case ColorHint.RGB if img.mode != "RGB":
            if img.mode in ("RGBA", "LA", "PA", "P"):
                return _flatten_alpha(img)
            return img.convert("RGB")
        case ColorHint.GRAY if img.mode != "L":
            if img.mode in ("RGBA", "LA", "PA", "P"):
                img = _flatten_alpha(img)
            elif img.mode in _HIGH_DEPTH_GRAY:
                return _to_gray8(img)
            return img.convert("L")
        case ColorHint.BINARY if img.mode != "1":
            if img.mode in ("RGBA", "LA", "PA", "P"):
                img = _flatten_alpha(img)
            elif img.mode in _HIGH_DEPTH_GRAY:
                img = _to_gray8(img)
            return img.convert("L").convert("1", dither=Image.Dither.NONE)
        case _:
            return img


def prepare_for_jpeg(img: Image.Image) -> Image.Image:
    """为 JPEG 编码准备图像：只保留 L / RGB"""
    match img.mode:
        case "RGB" | "L":
            return img
        case "1":
            return img.convert("L")
        case mode if mode in _HIGH_DEPTH_GRAY:
            return _to_gray8(img)
        case "RGBA" | "LA" | "PA" | "P":
            return _flatten_alpha(img)
        case _:
            # CMYK、YCbCr 等
            return img.convert("RGB")


def prepare_for_lossless(img: Image.Image, keep_modes: frozenset[str]) -> Image.Image:
    """为无损编码准备图像

    Args:
        img: 输入图像
        keep_modes: 容器可直接表达的模式，其余模式需转换
    """
    if img.mode in keep_modes:
        return img
    if img.mode in ("RGBA", "LA", "PA", "P"):
        img = _flatten_alpha(img)
        return img if img.mode in keep_modes else img.convert("RGB")
    if img.mode in _HIGH_DEPTH_GRAY:
        return _to_gray8(img)
    return img.convert("RGB")
