"""质量参数模型。

定义单次编码使用的压缩模式、有损质量、目标分辨率与颜色提示。
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class Compression(str, Enum):
    """压缩模式枚举"""

    AUTO = "auto"  # 二值/索引色 → 无损，连续色调 → JPEG
    JPEG = "jpeg"  # 有损，质量由 jpeg_quality 控制
    LOSSLESS = "lossless"  # Deflate/Flate
    CCITT = "ccitt"  # CCITT Group 4，仅适用于 1-bit 图像


class ColorHint(str, Enum):
    """颜色转换提示"""

    AUTO = "auto"  # 不转换
    RGB = "rgb"
    GRAY = "gray"
    BINARY = "binary"


class QualityProfile(BaseModel):
    """质量参数（不可变）

    构造时即校验取值范围，越界抛出 pydantic.ValidationError。
    """

    model_config = ConfigDict(frozen=True)

    compression: Compression = Field(Compression.AUTO, description="压缩模式")
    jpeg_quality: float = Field(0.8, ge=0.0, le=1.0, description="有损质量因子")
    target_dpi: PositiveInt | None = Field(
        None, description="目标分辨率，None 表示保持原分辨率"
    )
    color_hint: ColorHint = Field(ColorHint.AUTO, description="颜色转换提示")

    @property
    def jpeg_quality_percent(self) -> int:
        """映射为 Pillow 使用的 1-100 质量值"""
        return max(1, min(100, round(self.jpeg_quality * 100)))

    def describe(self) -> str:
        """简短描述，用于日志"""
        dpi = self.target_dpi if self.target_dpi is not None else "原始"
        return (
            f"compression={self.compression.value}, "
            f"quality={self.jpeg_quality:.2f}, dpi={dpi}, "
            f"color={self.color_hint.value}"
        )
