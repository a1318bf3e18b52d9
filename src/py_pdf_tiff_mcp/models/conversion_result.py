"""转换结果模型。

定义逐页编码结果、可恢复诊断、尺寸控制尝试记录以及整体转换结果。
"""

from enum import Enum
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, ConfigDict, Field

from .quality_profile import Compression


class EncodeStatus(str, Enum):
    """单页编码状态"""

    SUCCESS = "success"
    RECOVERED = "recovered"  # 发生回退但已成功编码
    FATAL = "fatal"


class SearchState(str, Enum):
    """尺寸控制搜索状态"""

    TRYING = "trying"
    COMMITTED = "committed"
    EXHAUSTED_FALLBACK = "exhausted_fallback"


class EncodedFrame(BaseModel):
    """已编码、尚未写入容器的单帧/单页数据"""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="编码后的数据")
    mode: Compression = Field(description="实际使用的压缩模式")
    width: int = Field(gt=0, description="像素宽度")
    height: int = Field(gt=0, description="像素高度")
    dpi_x: float = Field(gt=0, description="水平分辨率")
    dpi_y: float = Field(gt=0, description="垂直分辨率")
    params: dict[str, Any] = Field(
        default_factory=dict, description="容器相关的附加参数"
    )

    @property
    def size(self) -> int:
        return len(self.data)


class EncodeOutcome(BaseModel):
    """单页编码结果：成功 / 回退后成功 / 致命失败"""

    status: EncodeStatus
    frame: EncodedFrame | None = None
    reason: str | None = None

    @classmethod
    def success(cls, frame: EncodedFrame) -> "EncodeOutcome":
        return cls(status=EncodeStatus.SUCCESS, frame=frame)

    @classmethod
    def recovered(cls, frame: EncodedFrame, reason: str) -> "EncodeOutcome":
        return cls(status=EncodeStatus.RECOVERED, frame=frame, reason=reason)

    @classmethod
    def fatal(cls, reason: str) -> "EncodeOutcome":
        return cls(status=EncodeStatus.FATAL, reason=reason)

    @property
    def mode_used(self) -> Compression | None:
        return self.frame.mode if self.frame else None


class Diagnostic(BaseModel):
    """可恢复问题记录（不会中断转换）"""

    page_index: int = Field(description="页序")
    requested: Compression = Field(description="请求的压缩模式")
    substituted: Compression = Field(description="实际使用的压缩模式")
    reason: str = Field(description="回退原因")


class PageReport(BaseModel):
    """单页编码记录"""

    index: int
    requested: Compression
    resolved: Compression
    status: EncodeStatus
    width: int
    height: int
    dpi_x: float
    dpi_y: float
    encoded_size: int = Field(description="编码后的字节数")


class TrialRecord(BaseModel):
    """尺寸控制单次尝试记录"""

    profile_index: int
    output_size: int
    within_budget: bool


class BaseResult(BaseModel):
    """结果基类"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    def is_successful(self) -> bool:
        return self.success and self.error is None

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化字节数为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class ConversionResult(BaseResult):
    """一次文档转换的结果"""

    output_format: str = Field(description="输出格式 PDF/TIFF")
    output_size: int = Field(0, description="已提交的输出字节数")
    page_count: int = Field(0, description="页数")

    max_file_size: int | None = Field(None, description="尺寸上限（仅尺寸控制）")
    profile_index: int | None = Field(None, description="最终采用的质量参数序号")
    search_state: SearchState | None = Field(None, description="尺寸控制最终状态")
    trials: list[TrialRecord] = Field(default_factory=list)

    pages: list[PageReport] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def within_budget(self) -> bool | None:
        """输出是否满足尺寸上限，未启用尺寸控制时为 None"""
        if self.max_file_size is None:
            return None
        return self.output_size <= self.max_file_size

    def get_output_size_human(self) -> str:
        return self.format_size(self.output_size)

    def get_summary(self) -> str:
        """转换结果摘要"""
        if not self.success:
            return f"失败: {self.error}"

        summary = (
            f"{self.page_count} 页 → {self.output_format} "
            f"{self.get_output_size_human()}"
        )
        if self.max_file_size is not None:
            status = "满足" if self.within_budget else "超出"
            summary += (
                f"，{status}上限 {self.format_size(self.max_file_size)}"
                f"（采用第 {(self.profile_index or 0) + 1} 组参数，"
                f"共尝试 {len(self.trials)} 次）"
            )
        if self.diagnostics:
            summary += f"，{len(self.diagnostics)} 处压缩回退"
        return summary
