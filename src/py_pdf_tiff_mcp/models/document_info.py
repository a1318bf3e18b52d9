"""文档信息模型。"""

from pathlib import Path

from humanize import naturalsize
from pydantic import BaseModel, Field, computed_field


class PageInfo(BaseModel):
    """单页信息"""

    index: int
    width: float = Field(description="宽度（PDF 为点，TIFF 为像素）")
    height: float = Field(description="高度（PDF 为点，TIFF 为像素）")
    dpi_x: float | None = Field(None, description="水平分辨率，仅 TIFF")
    dpi_y: float | None = Field(None, description="垂直分辨率，仅 TIFF")
    mode: str | None = Field(None, description="颜色模式，仅 TIFF")
    compression: str | None = Field(None, description="帧压缩方式，仅 TIFF")
    orientation: int = Field(1, description="方向码")
    width_inches: float = Field(description="物理宽度（英寸）")
    height_inches: float = Field(description="物理高度（英寸）")


class DocumentInfo(BaseModel):
    """文档信息"""

    file_path: Path | None = None
    file_size: int = Field(description="文件大小（字节）")
    format: str = Field(description="文档格式 PDF/TIFF")
    pages: list[PageInfo] = Field(default_factory=list)

    @computed_field
    def page_count(self) -> int:
        return len(self.pages)

    def get_file_size_human(self) -> str:
        return naturalsize(self.file_size, binary=True)
