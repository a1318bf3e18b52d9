"""容器写入器基类。

写入分两步：encode() 只生成编码后的帧，不修改容器；append() 才把帧追加到容器。
编码失败不会在容器中留下残缺的页面。写入器可作为上下文管理器使用，退出时释放资源。
"""

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Any, ClassVar

from ..exceptions import CodecUnavailableError, ProcessingError
from ..models.conversion_result import EncodedFrame
from ..models.page_image import PageImage
from ..models.quality_profile import Compression


class ContainerWriter(ABC):
    """页面容器写入器

    子类提供静态编解码表 codecs：逻辑压缩模式 → 容器内的具体编码。
    """

    format_name: ClassVar[str]
    codecs: ClassVar[dict[Compression, str]]

    def __init__(self) -> None:
        self._page_count = 0
        self._closed = False
        self._released = False

    def __enter__(self) -> "ContainerWriter":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @property
    def page_count(self) -> int:
        """已追加的页数，也是下一页应有的页序"""
        return self._page_count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def available_modes(self) -> frozenset[Compression]:
        return frozenset(self.codecs)

    def encode(
        self, page: PageImage, mode: Compression, quality: int
    ) -> EncodedFrame:
        """将单页编码为帧（无副作用）

        Args:
            page: 已归一化、已缩放的页面
            mode: 解析后的压缩模式（不可为 AUTO）
            quality: 1-100 的 JPEG 质量，其余模式忽略

        Raises:
            CodecUnavailableError: 编解码表中没有该模式
            OSError, ValueError: 编码器失败
        """
        if mode not in self.codecs:
            raise CodecUnavailableError(
                f"{self.format_name} 容器不支持压缩模式 {mode.value}"
            )
        return self._encode(page, mode, quality)

    def append(self, frame: EncodedFrame) -> None:
        """追加一帧到容器末尾"""
        if self._closed:
            raise ProcessingError(f"{self.format_name} 容器已关闭，无法追加页面")
        self._append(frame)
        self._page_count += 1

    def getvalue(self) -> bytes:
        """结束写入并返回完整的容器字节"""
        if self._closed:
            raise ProcessingError(f"{self.format_name} 容器已关闭")
        if self._page_count == 0:
            raise ProcessingError(f"{self.format_name} 容器中没有页面")
        buffer = BytesIO()
        self._finish(buffer)
        self.close()
        return buffer.getvalue()

    def close(self) -> None:
        """关闭容器并释放资源，可重复调用"""
        self._closed = True
        if not self._released:
            self._released = True
            self._release()

    def _release(self) -> None:
        """持有外部资源的子类覆盖此方法"""

    @abstractmethod
    def _encode(
        self, page: PageImage, mode: Compression, quality: int
    ) -> EncodedFrame: ...

    @abstractmethod
    def _append(self, frame: EncodedFrame) -> None: ...

    @abstractmethod
    def _finish(self, buffer: BytesIO) -> None: ...
