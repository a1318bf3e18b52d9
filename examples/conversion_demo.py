#!/usr/bin/env python3
"""PDF ⇄ TIFF 转换演示脚本。

展示 py_pdf_tiff_mcp 库的核心功能，包括：
- PDF → 多帧 TIFF
- TIFF → PDF（页面尺寸由分辨率决定）
- 尺寸上限控制（按顺序尝试多组质量参数）
- 文档信息查询
"""

from pathlib import Path

import pymupdf

from py_pdf_tiff_mcp import (
    ColorHint,
    Compression,
    DocumentConverter,
    QualityProfile,
    SizeControlPlan,
)
from py_pdf_tiff_mcp.engine import inspect_document


def get_output_dir() -> Path:
    """获取输出目录 - 使用项目的 tmp 目录"""
    output_dir = Path(__file__).parent.parent / "tmp" / "examples"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def create_sample_pdf(path: Path) -> Path:
    """生成一份三页的示例 PDF"""
    doc = pymupdf.open()
    for number, (width, height) in enumerate([(595, 842), (842, 595), (420, 595)]):
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Sample page {number + 1}", fontsize=28)
        page.draw_rect(
            pymupdf.Rect(72, 120, width - 72, height / 2),
            color=(0.1, 0.1, 0.4),
            fill=(0.3 + 0.2 * number, 0.6, 0.8),
        )
    doc.save(path)
    doc.close()
    print(f"📄 已生成示例 PDF: {path.name}")
    return path


def print_document_info(path: Path) -> None:
    info = inspect_document(path.read_bytes(), path)
    print(f"  📊 {info.format} {info.page_count} 页 ({info.get_file_size_human()})")
    for page in info.pages:
        print(
            f"    - 第 {page.index + 1} 页: {page.width:g}x{page.height:g}，"
            f"{page.width_inches:.2f}x{page.height_inches:.2f} 英寸"
        )


def demo_direct_conversion(converter: DocumentConverter, pdf_path: Path) -> Path:
    """单组参数的双向转换"""
    print("\n🔄 单次转换")
    output_dir = get_output_dir()

    tiff_path = output_dir / "sample.tiff"
    result = converter.pdf_to_tiff_file(pdf_path, tiff_path, dpi=150)
    print(f"  ✅ PDF → TIFF: {result.get_summary()}")
    print_document_info(tiff_path)

    pdf_path_back = output_dir / "sample_back.pdf"
    result = converter.tiff_to_pdf_file(
        tiff_path, pdf_path_back, QualityProfile(compression=Compression.LOSSLESS)
    )
    print(f"  ✅ TIFF → PDF: {result.get_summary()}")
    print_document_info(pdf_path_back)
    return tiff_path


def demo_size_control(converter: DocumentConverter, tiff_path: Path) -> None:
    """在字节上限内逐级降低质量"""
    print("\n📉 尺寸上限控制")
    profiles = [
        QualityProfile(compression=Compression.JPEG, jpeg_quality=0.9),
        QualityProfile(compression=Compression.JPEG, jpeg_quality=0.5, target_dpi=100),
        QualityProfile(
            compression=Compression.CCITT, color_hint=ColorHint.BINARY, target_dpi=100
        ),
    ]

    for limit in (2 * 1024 * 1024, 150 * 1024, 1024):
        plan = SizeControlPlan(
            profiles=profiles,
            max_file_size=limit,
            source_path=tiff_path,
            dest_path=get_output_dir() / f"limited_{limit}.pdf",
        )
        result = converter.tiff_to_pdf_with_size_control(plan)
        trials = ", ".join(
            f"#{t.profile_index + 1}={t.output_size:,}B" for t in result.trials
        )
        print(f"  🎯 上限 {result.format_size(limit)}: {result.get_summary()}")
        print(f"     尝试记录: {trials}")
        for diagnostic in result.diagnostics:
            print(
                f"     ⚠️ 第 {diagnostic.page_index + 1} 页 "
                f"{diagnostic.requested.value} → {diagnostic.substituted.value}"
            )


def main():
    """主函数"""
    print("🗂️  PDF ⇄ TIFF 转换演示")
    print("=" * 50)

    try:
        converter = DocumentConverter()
        pdf_path = create_sample_pdf(get_output_dir() / "sample.pdf")
        tiff_path = demo_direct_conversion(converter, pdf_path)
        demo_size_control(converter, tiff_path)

        print("\n✅ 所有演示完成！")

    except Exception as e:
        print(f"\n❌ 演示过程中出现错误: {e}")
        raise


if __name__ == "__main__":
    main()
