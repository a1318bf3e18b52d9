"""页面图像模型。

单页栅格及其分辨率、方向与页序元数据。
"""

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from .constants import ResolutionDefaults


class PageImage(BaseModel):
    """单页图像

    由光栅化器或解码器逐页创建；归一化、缩放都会生成新对象，原对象不被修改。
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: Image.Image = Field(description="像素栅格")
    dpi_x: float = Field(ResolutionDefaults.FALLBACK_DPI, gt=0, description="水平分辨率")
    dpi_y: float = Field(ResolutionDefaults.FALLBACK_DPI, gt=0, description="垂直分辨率")
    orientation: int = Field(1, ge=1, le=8, description="TIFF/EXIF 方向码")
    index: int = Field(0, ge=0, description="页序（从 0 开始）")

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    @property
    def mode(self) -> str:
        return self.image.mode

    @property
    def width_inches(self) -> float:
        return self.image.width / self.dpi_x

    @property
    def height_inches(self) -> float:
        return self.image.height / self.dpi_y

    @property
    def width_points(self) -> float:
        """物理宽度（PDF 点）"""
        return self.width_inches * ResolutionDefaults.POINTS_PER_INCH

    @property
    def height_points(self) -> float:
        """物理高度（PDF 点）"""
        return self.height_inches * ResolutionDefaults.POINTS_PER_INCH

    def derive(self, image: Image.Image, **changes: float | int) -> "PageImage":
        """基于新栅格派生页面，其余元数据沿用当前值"""
        return self.model_copy(update={"image": image, **changes})
