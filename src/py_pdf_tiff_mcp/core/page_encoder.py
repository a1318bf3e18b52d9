"""单页编码模块。

按 归一化 → 颜色提示 → 缩放 → 解析压缩模式 → 编码 → 追加 的顺序处理单页，
并提供整份文档的单次编码。
"""

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import NoPagesError, ProcessingError
from ..models.conversion_result import (
    Diagnostic,
    EncodeOutcome,
    EncodeStatus,
    PageReport,
)
from ..models.page_image import PageImage
from ..models.quality_profile import ColorHint, Compression, QualityProfile
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .color import apply_color_hint, classify
from .normalizer import normalize, rescale
from .resolver import CompressionResolver


if TYPE_CHECKING:
    from ..engine.writer_base import ContainerWriter


logger = get_logger()


class EncodedDocument(BaseModel):
    """整份文档单次编码的结果（尚未提交）"""

    model_config = ConfigDict(frozen=True)

    data: bytes
    pages: list[PageReport] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.data)


class PageEncoder:
    """单页编码器

    可恢复的问题（CCITT 用于非二值内容、JPEG 编码失败）在此处理并记录为
    Diagnostic，不会向外抛出；致命问题以 ProcessingError 抛出。
    """

    def __init__(
        self, writer: "ContainerWriter", sink: logging.Logger | None = None
    ):
        self.writer = writer
        self.resolver = CompressionResolver(writer.available_modes)
        self.logger = sink or logger
        self.diagnostics: list[Diagnostic] = []

    def encode(self, page: PageImage, profile: QualityProfile) -> PageReport:
        """编码单页并追加到容器

        Raises:
            ProcessingError: 页序与容器位置不符，或编码器致命失败
            CodecUnavailableError: 请求的编码器不可用
        """
        if page.index != self.writer.page_count:
            raise ProcessingError(
                f"页序错误：期望第 {self.writer.page_count} 页，收到第 {page.index} 页"
            )

        prepared = normalize(page)
        if profile.color_hint is not ColorHint.AUTO:
            prepared = prepared.derive(
                apply_color_hint(prepared.image, profile.color_hint)
            )
        prepared = rescale(prepared, profile.target_dpi)

        decision = self.resolver.resolve(profile.compression, classify(prepared.image))
        status = EncodeStatus.SUCCESS
        if decision.substituted:
            self._record(page.index, decision.requested, decision.mode, decision.reason)
            status = EncodeStatus.RECOVERED

        outcome = self._encode_with_fallback(
            prepared, decision.mode, profile.jpeg_quality_percent
        )
        match outcome.status:
            case EncodeStatus.FATAL:
                raise ProcessingError(f"第 {page.index} 页编码失败: {outcome.reason}")
            case EncodeStatus.RECOVERED:
                self._record(
                    page.index, decision.mode, outcome.mode_used, outcome.reason
                )
                status = EncodeStatus.RECOVERED

        frame = outcome.frame
        self.writer.append(frame)

        return PageReport(
            index=page.index,
            requested=profile.compression,
            resolved=frame.mode,
            status=status,
            width=frame.width,
            height=frame.height,
            dpi_x=frame.dpi_x,
            dpi_y=frame.dpi_y,
            encoded_size=frame.size,
        )

    def _encode_with_fallback(
        self, page: PageImage, mode: Compression, quality: int
    ) -> EncodeOutcome:
        try:
            return EncodeOutcome.success(self.writer.encode(page, mode, quality))
        except (OSError, ValueError) as e:
            if mode is not Compression.JPEG:
                return EncodeOutcome.fatal(f"{mode.value} 编码器失败: {e}")
            reason = f"JPEG 编码失败: {e}"

        try:
            frame = self.writer.encode(page, Compression.LOSSLESS, quality)
        except (OSError, ValueError) as e:
            return EncodeOutcome.fatal(f"回退到 lossless 后仍然失败: {e}")
        return EncodeOutcome.recovered(frame, reason)

    def _record(
        self,
        page_index: int,
        requested: Compression,
        substituted: Compression,
        reason: str,
    ) -> None:
        self.logger.warning(
            MessageFormatter.compression_fallback(
                page_index, requested.value, substituted.value, reason
            )
        )
        self.diagnostics.append(
            Diagnostic(
                page_index=page_index,
                requested=requested,
                substituted=substituted,
                reason=reason,
            )
        )


def encode_document(
    pages: Sequence[PageImage],
    profile: QualityProfile,
    writer_factory: Callable[[], "ContainerWriter"],
    sink: logging.Logger | None = None,
) -> EncodedDocument:
    """使用一组质量参数把所有页面按顺序编码到新的容器中

    Raises:
        NoPagesError: 页面序列为空（在任何编码之前检查）
    """
    if not pages:
        raise NoPagesError()

    with writer_factory() as writer:
        encoder = PageEncoder(writer, sink)
        reports = [encoder.encode(page, profile) for page in pages]
        data = writer.getvalue()

    return EncodedDocument(data=data, pages=reports, diagnostics=encoder.diagnostics)
