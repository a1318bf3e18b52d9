"""PDF 容器写入器。

每页嵌入一幅图像并铺满页面，页面尺寸 = 像素 × 72 / DPI（点）。

支持：
- JPEG 图像（DCTDecode）
- 无损图像（FlateDecode，1-bit / 灰度 / RGB / CMYK）
- 1-bit 图像的 CCITT G4（CCITTFaxDecode，由 img2pdf 生成编码数据）
"""

import zlib
from decimal import Decimal
from io import BytesIO
from typing import Any, ClassVar

import img2pdf
import pikepdf
from pikepdf import Dictionary, Name, Pdf, Stream

from ..core.color import prepare_for_jpeg, prepare_for_lossless
from ..models.constants import PDF_CODECS, ResolutionDefaults
from ..models.conversion_result import EncodedFrame
from ..models.page_image import PageImage
from ..models.quality_profile import Compression
from ..utils.logging_helpers import get_logger
from .writer_base import ContainerWriter


logger = get_logger()

_COLORSPACES: dict[str, str] = {
    "1": "/DeviceGray",
    "L": "/DeviceGray",
    "RGB": "/DeviceRGB",
    "CMYK": "/DeviceCMYK",
}


def _plain(value: Any) -> Any:
    """将 pikepdf 对象转换为普通 Python 值，使其脱离来源文档"""
    if isinstance(value, Name):
        return str(value)
    if isinstance(value, pikepdf.Array):
        return [_plain(item) for item in value]
    if isinstance(value, Dictionary):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, Decimal):
        return float(value)
    return value


def _single(value: Any) -> Any:
    """单元素数组（img2pdf 的 /Filter、/DecodeParms）取出其唯一元素"""
    if isinstance(value, list) and len(value) == 1:
        return value[0]
    return value


def _pdf_value(value: Any) -> Any:
    """普通 Python 值 → pikepdf 对象"""
    if isinstance(value, str) and value.startswith("/"):
        return Name(value)
    if isinstance(value, list):
        return pikepdf.Array([_pdf_value(item) for item in value])
    if isinstance(value, dict):
        return Dictionary({key: _pdf_value(item) for key, item in value.items()})
    return value


def encode_ccitt_g4(img) -> dict[str, Any]:
    """使用 CCITT G4 编码 1-bit 图像

    先用 Pillow 写出 Group 4 TIFF，再交给 img2pdf 生成单页 PDF，
    从中取出图像流的原始数据及其解码参数。

    Returns:
        dict: data / filter / colorspace / bpc / decode_parms / decode
    """
    if img.mode != "1":
        raise ValueError(f"CCITT G4 需要 1-bit 图像，当前模式: {img.mode}")

    tiff_buffer = BytesIO()
    img.save(tiff_buffer, format="TIFF", compression="group4")
    pdf_bytes = img2pdf.convert(tiff_buffer.getvalue())

    with pikepdf.open(BytesIO(pdf_bytes)) as temp_pdf:
        page = temp_pdf.pages[0]
        for _, xobj in page.Resources.XObject.items():
            if xobj.get("/Subtype") != Name.Image:
                continue
            return {
                "data": xobj.read_raw_bytes(),
                "filter": _single(_plain(xobj.get("/Filter"))),
                "colorspace": _plain(xobj.get("/ColorSpace", Name.DeviceGray)),
                "bpc": int(xobj.get("/BitsPerComponent", 1)),
                "decode_parms": _single(_plain(xobj.get("/DecodeParms"))),
                "decode": _plain(xobj.get("/Decode")),
            }

    raise ValueError("img2pdf 输出中没有找到图像对象")


class PdfContainerWriter(ContainerWriter):
    """PDF 容器写入器（pikepdf）"""

    format_name: ClassVar[str] = "PDF"
    codecs: ClassVar[dict[Compression, str]] = PDF_CODECS

    # FlateDecode 可直接表达的图像模式
    LOSSLESS_MODES: ClassVar[frozenset[str]] = frozenset(_COLORSPACES)

    def __init__(self) -> None:
        super().__init__()
        self.pdf = Pdf.new()

    def _encode(
        self, page: PageImage, mode: Compression, quality: int
    ) -> EncodedFrame:
        match mode:
            case Compression.JPEG:
                img = prepare_for_jpeg(page.image)
                buffer = BytesIO()
                img.save(buffer, format="JPEG", quality=quality)
                params = {
                    "filter": "/DCTDecode",
                    "colorspace": _COLORSPACES[img.mode],
                    "bpc": 8,
                }
                data = buffer.getvalue()
            case Compression.CCITT:
                img = page.image
                params = encode_ccitt_g4(img)
                data = params.pop("data")
            case _:
                img = prepare_for_lossless(page.image, self.LOSSLESS_MODES)
                params = {
                    "filter": "/FlateDecode",
                    "colorspace": _COLORSPACES[img.mode],
                    "bpc": 1 if img.mode == "1" else 8,
                }
                data = zlib.compress(img.tobytes(), level=9)

        return EncodedFrame(
            data=data,
            mode=mode,
            width=img.width,
            height=img.height,
            dpi_x=page.dpi_x,
            dpi_y=page.dpi_y,
            params=params,
        )

    def _append(self, frame: EncodedFrame) -> None:
        width_pts = frame.width * ResolutionDefaults.POINTS_PER_INCH / frame.dpi_x
        height_pts = frame.height * ResolutionDefaults.POINTS_PER_INCH / frame.dpi_y

        self.pdf.add_blank_page(page_size=(width_pts, height_pts))
        pdf_page = self.pdf.pages[-1]

        image_dict = Dictionary(
            {
                "/Type": Name.XObject,
                "/Subtype": Name.Image,
                "/Width": frame.width,
                "/Height": frame.height,
                "/ColorSpace": _pdf_value(frame.params["colorspace"]),
                "/BitsPerComponent": frame.params["bpc"],
                "/Filter": _pdf_value(frame.params["filter"]),
            }
        )
        if decode_parms := frame.params.get("decode_parms"):
            image_dict["/DecodeParms"] = _pdf_value(decode_parms)
        if decode := frame.params.get("decode"):
            image_dict["/Decode"] = _pdf_value(decode)

        image_stream = Stream(self.pdf, frame.data, image_dict)
        pdf_page.Resources = Dictionary(
            {"/XObject": Dictionary({"/Im0": self.pdf.make_indirect(image_stream)})}
        )

        content = f"q\n{width_pts:.4f} 0 0 {height_pts:.4f} 0 0 cm\n/Im0 Do\nQ"
        pdf_page.Contents = self.pdf.make_indirect(
            Stream(self.pdf, content.encode("latin-1"))
        )

        logger.debug(
            f"添加第 {self.page_count} 页: {frame.width}x{frame.height} "
            f"{frame.mode.value}, {frame.size:,} bytes"
        )

    def _finish(self, buffer: BytesIO) -> None:
        # deterministic_id 保证相同输入得到逐字节相同的输出
        self.pdf.save(buffer, deterministic_id=True)

    def _release(self) -> None:
        self.pdf.close()
