"""压缩模式解析模块。

根据请求的压缩模式与页面颜色特征确定实际使用的压缩模式。
可用编码器由容器的静态编解码表决定，在构造时确定，运行期间不再探测。
"""

from collections.abc import Iterable

from pydantic import BaseModel, Field

from ..exceptions import CodecUnavailableError
from ..models.quality_profile import Compression
from .color import ColorKind


class CompressionDecision(BaseModel):
    """压缩解析结果"""

    requested: Compression = Field(description="请求的压缩模式")
    mode: Compression = Field(description="实际使用的压缩模式")
    reason: str | None = Field(None, description="发生替换时的原因")

    @property
    def substituted(self) -> bool:
        return self.reason is not None


class CompressionResolver:
    """压缩模式解析器

    AUTO：二值/索引色 → LOSSLESS，连续色调 → JPEG（JPEG 不可用时为 LOSSLESS）。
    CCITT：仅适用于 1-bit 图像，其余内容替换为 LOSSLESS（可恢复）。
    JPEG / LOSSLESS：原样返回；请求的编码器不可用时抛出 CodecUnavailableError。
    """

    def __init__(self, available: Iterable[Compression]):
        self.available = frozenset(available)
        # 不可用的编码器在此处即被排除出 AUTO
        self.auto_lossy = (
            Compression.JPEG
            if Compression.JPEG in self.available
            else Compression.LOSSLESS
        )

    def resolve(self, requested: Compression, kind: ColorKind) -> CompressionDecision:
        match requested:
            case Compression.AUTO:
                mode = self.auto_lossy if kind.is_continuous_tone else Compression.LOSSLESS
                return CompressionDecision(requested=requested, mode=mode)
            case Compression.CCITT if kind is not ColorKind.BINARY:
                return CompressionDecision(
                    requested=requested,
                    mode=Compression.LOSSLESS,
                    reason=f"CCITT 仅支持 1-bit 图像，当前内容为 {kind.value}",
                )
            case Compression.LOSSLESS:
                return CompressionDecision(requested=requested, mode=requested)
            case _:
                if requested not in self.available:
                    raise CodecUnavailableError(
                        f"压缩模式 {requested.value} 没有可用的编码器"
                    )
                return CompressionDecision(requested=requested, mode=requested)
