"""测试配置文件。

提供测试所需的fixtures和合成文档。
"""

import tempfile
from io import BytesIO
from pathlib import Path

import pymupdf
import pytest
from PIL import Image, ImageDraw, TiffImagePlugin

from py_pdf_tiff_mcp.engine.writer_base import ContainerWriter
from py_pdf_tiff_mcp.models.constants import TiffTags
from py_pdf_tiff_mcp.models.conversion_result import EncodedFrame
from py_pdf_tiff_mcp.models.page_image import PageImage
from py_pdf_tiff_mcp.models.quality_profile import Compression


def make_page(
    size: tuple[int, int] = (120, 80),
    mode: str = "RGB",
    dpi: float | tuple[float, float] = 100.0,
    orientation: int = 1,
    index: int = 0,
) -> PageImage:
    """创建带有非对称图案的测试页面，便于检查旋转/翻转"""
    dpi_x, dpi_y = dpi if isinstance(dpi, tuple) else (dpi, dpi)
    img = Image.new("RGB", size, color="white")
    draw = ImageDraw.Draw(img)
    width, height = size
    # 左上角标记块，右下区域渐变条纹
    draw.rectangle([0, 0, width // 4, height // 4], fill=(200, 30, 30))
    for i in range(0, width, 6):
        draw.line([i, height // 2, i, height - 1], fill=(i * 3 % 256, 90, 160))
    return PageImage(
        image=img if mode == "RGB" else img.convert(mode),
        dpi_x=dpi_x,
        dpi_y=dpi_y,
        orientation=orientation,
        index=index,
    )


def make_pdf_bytes(
    page_sizes: list[tuple[float, float]] | None = None,
) -> bytes:
    """使用 PyMuPDF 生成带文字和色块的多页 PDF（尺寸单位：点）"""
    page_sizes = page_sizes or [(595, 842), (842, 595)]
    doc = pymupdf.open()
    for number, (width, height) in enumerate(page_sizes):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {number + 1}", fontsize=24)
        page.draw_rect(
            pymupdf.Rect(72, 120, width - 72, 220),
            color=(0, 0, 1),
            fill=(0.2, 0.6, 0.9),
        )
    data = doc.tobytes()
    doc.close()
    return data


def make_tiff_bytes(
    frames: list[tuple[tuple[int, int], str, float | tuple[float, float]]] | None = None,
    orientations: list[int] | None = None,
) -> bytes:
    """使用 Pillow 生成多帧 TIFF，每帧有各自的 DPI

    Args:
        frames: (像素尺寸, 模式, DPI 或 (水平, 垂直) DPI) 列表
        orientations: 每帧的方向码（可选）
    """
    frames = frames or [((200, 300), "RGB", 100.0), ((300, 200), "L", 150.0)]
    orientations = orientations or [1] * len(frames)

    buffer = BytesIO()
    with TiffImagePlugin.AppendingTiffWriter(buffer) as tf:
        for i, ((size, mode, dpi), orientation) in enumerate(
            zip(frames, orientations, strict=True)
        ):
            img = make_page(size, mode=mode, index=i).image
            img.save(
                tf,
                format="TIFF",
                compression="raw",
                dpi=dpi if isinstance(dpi, tuple) else (dpi, dpi),
                tiffinfo={TiffTags.ORIENTATION: orientation},
            )
            tf.newFrame()
    return buffer.getvalue()


@pytest.fixture
def temp_dir():
    """临时目录fixture"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def pdf_bytes() -> bytes:
    """两页 PDF：A4 纵向 + A4 横向"""
    return make_pdf_bytes()


@pytest.fixture
def tiff_bytes() -> bytes:
    """两帧 TIFF：RGB 100 DPI + 灰度"""
    return make_tiff_bytes()


@pytest.fixture
def pdf_file(temp_dir: Path, pdf_bytes: bytes) -> Path:
    path = temp_dir / "sample.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def tiff_file(temp_dir: Path, tiff_bytes: bytes) -> Path:
    path = temp_dir / "sample.tiff"
    path.write_bytes(tiff_bytes)
    return path


class FakeWriter(ContainerWriter):
    """记录调用的内存写入器，可指定某些压缩模式编码失败"""

    format_name = "FAKE"
    codecs = {
        Compression.JPEG: "jpeg",
        Compression.LOSSLESS: "raw",
        Compression.CCITT: "group4",
    }

    def __init__(self, fail_modes: tuple[Compression, ...] = ()):
        super().__init__()
        self.fail_modes = set(fail_modes)
        self.encoded: list[Compression] = []
        self.frames: list[EncodedFrame] = []

    def _encode(self, page, mode, quality):
        self.encoded.append(mode)
        if mode in self.fail_modes:
            raise OSError(f"{mode.value} encoder broken")
        return EncodedFrame(
            data=page.image.tobytes(),
            mode=mode,
            width=page.width,
            height=page.height,
            dpi_x=page.dpi_x,
            dpi_y=page.dpi_y,
            params={"quality": quality},
        )

    def _append(self, frame):
        self.frames.append(frame)

    def _finish(self, buffer):
        for frame in self.frames:
            buffer.write(frame.data)
