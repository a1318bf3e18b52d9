"""文档与编码相关常量定义。

编解码表在导入时基于 Pillow 的编译特性静态构建，运行期间不再探测。
"""

from typing import Final

from PIL import features

from .quality_profile import Compression


class DocumentFormats:
    """支持的容器格式"""

    PDF: Final[str] = "PDF"
    TIFF: Final[str] = "TIFF"

    PDF_MAGIC: Final[bytes] = b"%PDF"
    TIFF_MAGICS: Final[tuple[bytes, ...]] = (
        b"II*\x00",  # little-endian
        b"MM\x00*",  # big-endian
        b"II+\x00",  # BigTIFF
        b"MM\x00+",
    )

    EXTENSIONS: Final[dict[str, str]] = {
        "PDF": ".pdf",
        "TIFF": ".tiff",
    }

    @classmethod
    def get_extension(cls, format_name: str) -> str:
        """获取格式对应的扩展名"""
        format_upper = format_name.upper()
        if format_upper == "TIF":
            format_upper = "TIFF"
        try:
            return cls.EXTENSIONS[format_upper]
        except KeyError:
            raise ValueError(f"不支持的文档格式: {format_name}") from None


class TiffTags:
    """TIFF 6.0 标签编号"""

    ORIENTATION: Final[int] = 274
    X_RESOLUTION: Final[int] = 282
    Y_RESOLUTION: Final[int] = 283
    RESOLUTION_UNIT: Final[int] = 296

    # ResolutionUnit 取值
    UNIT_NONE: Final[int] = 1
    UNIT_INCH: Final[int] = 2
    UNIT_CENTIMETER: Final[int] = 3

    CM_PER_INCH: Final[float] = 2.54


class ResolutionDefaults:
    """分辨率相关默认值"""

    # 元数据缺失时使用的分辨率
    FALLBACK_DPI: Final[float] = 72.0

    # PDF 用户空间单位：每英寸 72 点
    POINTS_PER_INCH: Final[float] = 72.0


# Pillow 编译特性
HAS_LIBTIFF: Final[bool] = bool(features.check("libtiff"))
HAS_JPEG: Final[bool] = bool(features.check("jpg"))


def _build_tiff_codecs() -> dict[Compression, str]:
    """TIFF 帧压缩表：逻辑压缩模式 → Pillow compression 参数"""
    table: dict[Compression, str] = {}
    if HAS_LIBTIFF and HAS_JPEG:
        table[Compression.JPEG] = "jpeg"
    # 无 libtiff 时仍可写入未压缩数据，保证无损模式始终可用
    table[Compression.LOSSLESS] = "tiff_deflate" if HAS_LIBTIFF else "raw"
    if HAS_LIBTIFF:
        table[Compression.CCITT] = "group4"
    return table


def _build_pdf_codecs() -> dict[Compression, str]:
    """PDF 页面压缩表：逻辑压缩模式 → PDF 过滤器名"""
    table: dict[Compression, str] = {}
    if HAS_JPEG:
        table[Compression.JPEG] = "/DCTDecode"
    table[Compression.LOSSLESS] = "/FlateDecode"
    if HAS_LIBTIFF:
        table[Compression.CCITT] = "/CCITTFaxDecode"
    return table


TIFF_CODECS: Final[dict[Compression, str]] = _build_tiff_codecs()
PDF_CODECS: Final[dict[Compression, str]] = _build_pdf_codecs()
