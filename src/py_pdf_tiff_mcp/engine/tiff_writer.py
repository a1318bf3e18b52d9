"""TIFF 容器写入器。

每一帧先独立编码为单帧 TIFF，再用 Pillow 的 AppendingTiffWriter 依次拼接，
因此每帧可以使用各自解析出的压缩方式。
"""

from io import BytesIO
from typing import ClassVar

from PIL.TiffImagePlugin import AppendingTiffWriter

from ..core.color import prepare_for_jpeg, prepare_for_lossless
from ..models.constants import TIFF_CODECS
from ..models.conversion_result import EncodedFrame
from ..models.page_image import PageImage
from ..models.quality_profile import Compression
from ..utils.logging_helpers import get_logger
from .writer_base import ContainerWriter


logger = get_logger()


class TiffContainerWriter(ContainerWriter):
    """多帧 TIFF 写入器"""

    format_name: ClassVar[str] = "TIFF"
    codecs: ClassVar[dict[Compression, str]] = TIFF_CODECS

    LOSSLESS_MODES: ClassVar[frozenset[str]] = frozenset(
        {"1", "L", "LA", "P", "RGB", "RGBA", "CMYK"}
    )

    def __init__(self) -> None:
        super().__init__()
        self._frames: list[bytes] = []

    def _encode(
        self, page: PageImage, mode: Compression, quality: int
    ) -> EncodedFrame:
        save_params: dict[str, object] = {
            "format": "TIFF",
            "compression": self.codecs[mode],
            "dpi": (page.dpi_x, page.dpi_y),
        }

        match mode:
            case Compression.JPEG:
                img = prepare_for_jpeg(page.image)
                save_params["quality"] = quality
            case Compression.CCITT:
                img = page.image
                if img.mode != "1":
                    raise ValueError(f"CCITT G4 需要 1-bit 图像，当前模式: {img.mode}")
            case _:
                img = prepare_for_lossless(page.image, self.LOSSLESS_MODES)

        buffer = BytesIO()
        img.save(buffer, **save_params)

        return EncodedFrame(
            data=buffer.getvalue(),
            mode=mode,
            width=img.width,
            height=img.height,
            dpi_x=page.dpi_x,
            dpi_y=page.dpi_y,
            params={"compression": save_params["compression"]},
        )

    def _append(self, frame: EncodedFrame) -> None:
        self._frames.append(frame.data)
        logger.debug(
            f"添加第 {self.page_count} 帧: {frame.width}x{frame.height} "
            f"{frame.params['compression']}, {frame.size:,} bytes"
        )

    def _finish(self, buffer: BytesIO) -> None:
        # 单帧 TIFF 中的偏移量由 AppendingTiffWriter 在拼接时修正
        with AppendingTiffWriter(buffer) as tf:
            for data in self._frames:
                tf.write(data)
                tf.newFrame()

    def _release(self) -> None:
        self._frames.clear()
