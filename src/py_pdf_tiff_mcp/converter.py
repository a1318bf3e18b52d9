"""PDF ⇄ TIFF 文档转换接口。

两个方向结构对称：
- PDF → TIFF：光栅化每一页，编码为多帧 TIFF
- TIFF → PDF：解码每一帧及其分辨率/方向，排版为每页一幅图像的 PDF

所有入口先编码到内存缓冲区，成功后才写入输出，致命错误不会写出任何字节。
"""

import logging
from collections.abc import Callable, Sequence
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from .core.page_encoder import EncodedDocument, encode_document
from .core.size_control import SizeControlSearch
from .engine.decoder import TiffDecoder
from .engine.pdf_writer import PdfContainerWriter
from .engine.rasterizer import PdfRasterizer
from .engine.tiff_writer import TiffContainerWriter
from .engine.writer_base import ContainerWriter
from .exceptions import NoPagesError, ValidationError
from .models import (
    ConversionResult,
    DocumentFormats,
    PageImage,
    QualityProfile,
    SizeControlPlan,
)
from .utils.cleanup_helpers import OutputGuard
from .utils.file_helpers import ensure_input_file, read_all, write_all
from .utils.logging_helpers import get_logger


logger = get_logger()

PageLoader = Callable[[BinaryIO], list[PageImage]]
StreamConversion = Callable[[BinaryIO, BinaryIO], ConversionResult]


class DocumentConverter:
    """PDF ⇄ TIFF 文档转换器

    输入在每次调用中只读取、光栅化/解码一次；尺寸控制的每次尝试都从这些页面重新完整编码。
    """

    def __init__(
        self,
        rasterizer: PdfRasterizer | None = None,
        decoder: TiffDecoder | None = None,
        sink: logging.Logger | None = None,
    ):
        """初始化转换器。

        Args:
            rasterizer: PDF 光栅化器，None 使用默认实现
            decoder: TIFF 解码器，None 使用默认实现
            sink: 日志记录器，用于观察编码与尺寸控制过程
        """
        self.rasterizer = rasterizer or PdfRasterizer()
        self.decoder = decoder or TiffDecoder()
        self.logger = sink or logger

    # ---- 流 → 流 ----

    def pdf_to_tiff(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        profile: QualityProfile | None = None,
        dpi: int | None = None,
    ) -> ConversionResult:
        """PDF 流 → 多帧 TIFF 流

        Args:
            source: PDF 输入流
            dest: TIFF 输出流
            profile: 质量参数，None 使用默认值
            dpi: 光栅化分辨率，None 使用配置默认值

        Raises:
            NoPagesError: PDF 没有页面
            ConversionError: 其他致命错误
        """
        pages = self._rasterize(source, dpi)
        return self._convert_direct(pages, dest, profile, TiffContainerWriter)

    def tiff_to_pdf(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        profile: QualityProfile | None = None,
    ) -> ConversionResult:
        """TIFF 流 → PDF 流，每页物理尺寸由帧的分辨率决定"""
        pages = self._decode(source)
        return self._convert_direct(pages, dest, profile, PdfContainerWriter)

    # ---- 路径 → 路径 ----

    def pdf_to_tiff_file(
        self,
        source_path: str | Path,
        dest_path: str | Path,
        profile: QualityProfile | None = None,
        dpi: int | None = None,
    ) -> ConversionResult:
        return self._run_file(
            source_path,
            dest_path,
            lambda source, dest: self.pdf_to_tiff(source, dest, profile, dpi),
        )

    def tiff_to_pdf_file(
        self,
        source_path: str | Path,
        dest_path: str | Path,
        profile: QualityProfile | None = None,
    ) -> ConversionResult:
        return self._run_file(
            source_path,
            dest_path,
            lambda source, dest: self.tiff_to_pdf(source, dest, profile),
        )

    # ---- 尺寸控制 ----

    def pdf_to_tiff_with_size_control(self, plan: SizeControlPlan) -> ConversionResult:
        """在尺寸上限内将 PDF 转换为 TIFF

        按计划中的顺序尝试质量参数，提交第一个满足上限的结果；
        全部超出时提交最后一组的结果（不视为错误，调用方可检查 within_budget）。
        """
        return self._run_plan(
            plan,
            lambda source: self._rasterize(source, plan.render_dpi),
            TiffContainerWriter,
        )

    def tiff_to_pdf_with_size_control(self, plan: SizeControlPlan) -> ConversionResult:
        """在尺寸上限内将 TIFF 转换为 PDF"""
        return self._run_plan(plan, self._decode, PdfContainerWriter)

    # ---- 内部实现 ----

    def _rasterize(self, source: BinaryIO, dpi: int | None) -> list[PageImage]:
        return self.rasterizer.rasterize(read_all(source), dpi)

    def _decode(self, source: BinaryIO) -> list[PageImage]:
        return self.decoder.decode(read_all(source))

    def _convert_direct(
        self,
        pages: Sequence[PageImage],
        dest: BinaryIO,
        profile: QualityProfile | None,
        writer_factory: type[ContainerWriter],
    ) -> ConversionResult:
        profile = profile or QualityProfile()
        self.logger.debug(f"单次编码: {profile.describe()}")

        document = encode_document(pages, profile, writer_factory, self.logger)
        write_all(document.data, dest)

        return self._build_result(writer_factory.format_name, len(pages), document)

    def _run_plan(
        self,
        plan: SizeControlPlan,
        load_pages: PageLoader,
        writer_factory: type[ContainerWriter],
    ) -> ConversionResult:
        def search(source: BinaryIO, dest: BinaryIO) -> ConversionResult:
            return self._search(plan, load_pages(source), dest, writer_factory)

        if plan.is_file_pair:
            return self._run_file(plan.source_path, plan.dest_path, search)
        return search(plan.source_stream, plan.dest_stream)

    def _search(
        self,
        plan: SizeControlPlan,
        pages: Sequence[PageImage],
        dest: BinaryIO,
        writer_factory: type[ContainerWriter],
    ) -> ConversionResult:
        # 在任何编码尝试之前检查
        if not pages:
            raise NoPagesError(plan.source_path)

        search = SizeControlSearch(plan.profiles, plan.max_file_size, self.logger)
        outcome = search.run(
            lambda profile: encode_document(pages, profile, writer_factory, self.logger)
        )
        write_all(outcome.document.data, dest)

        return self._build_result(
            writer_factory.format_name,
            len(pages),
            outcome.document,
            max_file_size=plan.max_file_size,
            profile_index=outcome.profile_index,
            search_state=outcome.state,
            trials=outcome.trials,
        )

    def _run_file(
        self,
        source_path: str | Path,
        dest_path: str | Path,
        convert: StreamConversion,
    ) -> ConversionResult:
        """打开输入文件执行一次流转换，成功后再写入输出文件"""
        source_path = ensure_input_file(source_path)
        dest_path = Path(dest_path)
        if dest_path.resolve() == source_path.resolve():
            raise ValidationError("输出路径不能与输入路径相同", source_path)

        buffer = BytesIO()
        with source_path.open("rb") as source:
            result = convert(source, buffer)

        dest_path.parent.mkdir(parents=True, exist_ok=True)
        with OutputGuard(dest_path), dest_path.open("wb") as dest:
            write_all(buffer.getvalue(), dest)

        self.logger.info(f"已写入 {dest_path}: {result.get_summary()}")
        return result

    def _build_result(
        self,
        output_format: str,
        page_count: int,
        document: EncodedDocument,
        **search_fields,
    ) -> ConversionResult:
        result = ConversionResult(
            success=True,
            output_format=output_format,
            output_size=document.size,
            page_count=page_count,
            pages=document.pages,
            diagnostics=document.diagnostics,
            **search_fields,
        )
        self.logger.debug(f"转换完成: {result.get_summary()}")
        return result


# 全局转换器实例
_default_converter = DocumentConverter()


def _is_path_pair(source: object, dest: object) -> bool:
    """source 与 dest 须同为路径或同为流"""
    source_is_path = isinstance(source, str | Path)
    if source_is_path != isinstance(dest, str | Path):
        raise ValidationError("source 与 dest 必须同为文件路径或同为二进制流")
    return source_is_path


def pdf_to_tiff(
    source: BinaryIO | str | Path,
    dest: BinaryIO | str | Path,
    profile: QualityProfile | None = None,
    dpi: int | None = None,
) -> ConversionResult:
    """便捷函数：PDF → TIFF，同时接受路径或二进制流"""
    if _is_path_pair(source, dest):
        return _default_converter.pdf_to_tiff_file(source, dest, profile, dpi)
    return _default_converter.pdf_to_tiff(source, dest, profile, dpi)


def tiff_to_pdf(
    source: BinaryIO | str | Path,
    dest: BinaryIO | str | Path,
    profile: QualityProfile | None = None,
) -> ConversionResult:
    """便捷函数：TIFF → PDF，同时接受路径或二进制流"""
    if _is_path_pair(source, dest):
        return _default_converter.tiff_to_pdf_file(source, dest, profile)
    return _default_converter.tiff_to_pdf(source, dest, profile)


def convert_with_size_control(
    plan: SizeControlPlan, target_format: str
) -> ConversionResult:
    """便捷函数：按尺寸控制计划转换

    Args:
        plan: 尺寸控制计划
        target_format: 目标格式 "TIFF" 或 "PDF"
    """
    match target_format.upper():
        case "TIFF" | "TIF":
            return _default_converter.pdf_to_tiff_with_size_control(plan)
        case DocumentFormats.PDF:
            return _default_converter.tiff_to_pdf_with_size_control(plan)
        case _:
            raise ValidationError(f"不支持的目标格式: {target_format}")
