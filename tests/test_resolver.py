"""压缩模式解析与颜色处理测试。"""

import pytest
from PIL import Image

from py_pdf_tiff_mcp.core.color import (
    ColorKind,
    apply_color_hint,
    classify,
    prepare_for_jpeg,
    prepare_for_lossless,
)
from py_pdf_tiff_mcp.core.resolver import CompressionResolver
from py_pdf_tiff_mcp.exceptions import CodecUnavailableError
from py_pdf_tiff_mcp.models import ColorHint, Compression


ALL_CODECS = [Compression.JPEG, Compression.LOSSLESS, Compression.CCITT]


class TestClassify:
    """颜色特征判断测试"""

    @pytest.mark.parametrize(
        ("mode", "kind"),
        [
            ("1", ColorKind.BINARY),
            ("P", ColorKind.INDEXED),
            ("L", ColorKind.GRAY),
            ("LA", ColorKind.GRAY),
            ("I;16", ColorKind.GRAY),
            ("RGB", ColorKind.RGB),
            ("RGBA", ColorKind.RGB),
            ("CMYK", ColorKind.RGB),
        ],
    )
    def test_modes(self, mode, kind):
        assert classify(Image.new(mode, (4, 4))) is kind


class TestCompressionResolver:
    """压缩模式解析测试"""

    @pytest.fixture
    def resolver(self):
        return CompressionResolver(ALL_CODECS)

    @pytest.mark.parametrize("kind", [ColorKind.BINARY, ColorKind.INDEXED])
    def test_auto_lossless_for_binary_and_indexed(self, resolver, kind):
        decision = resolver.resolve(Compression.AUTO, kind)
        assert decision.mode is Compression.LOSSLESS
        assert not decision.substituted

    @pytest.mark.parametrize("kind", [ColorKind.GRAY, ColorKind.RGB])
    def test_auto_jpeg_for_continuous_tone(self, resolver, kind):
        assert resolver.resolve(Compression.AUTO, kind).mode is Compression.JPEG

    def test_auto_excludes_absent_jpeg(self):
        """JPEG 编码器缺失时 AUTO 解析为 LOSSLESS"""
        resolver = CompressionResolver([Compression.LOSSLESS])
        assert resolver.resolve(Compression.AUTO, ColorKind.RGB).mode is (
            Compression.LOSSLESS
        )

    def test_ccitt_on_binary(self, resolver):
        decision = resolver.resolve(Compression.CCITT, ColorKind.BINARY)
        assert decision.mode is Compression.CCITT
        assert decision.reason is None

    @pytest.mark.parametrize(
        "kind", [ColorKind.RGB, ColorKind.GRAY, ColorKind.INDEXED]
    )
    def test_ccitt_on_non_binary_substitutes_lossless(self, resolver, kind):
        """CCITT 用于非二值内容：替换为 LOSSLESS，可恢复，不抛异常"""
        decision = resolver.resolve(Compression.CCITT, kind)
        assert decision.mode is Compression.LOSSLESS
        assert decision.substituted
        assert "CCITT" in decision.reason

    @pytest.mark.parametrize("kind", list(ColorKind))
    def test_lossless_always_valid(self, kind):
        resolver = CompressionResolver([])
        decision = resolver.resolve(Compression.LOSSLESS, kind)
        assert decision.mode is Compression.LOSSLESS
        assert not decision.substituted

    def test_explicit_unavailable_codec_is_fatal(self):
        resolver = CompressionResolver([Compression.LOSSLESS])
        with pytest.raises(CodecUnavailableError):
            resolver.resolve(Compression.JPEG, ColorKind.RGB)
        with pytest.raises(CodecUnavailableError):
            resolver.resolve(Compression.CCITT, ColorKind.BINARY)


class TestColorHints:
    """颜色提示与 JPEG 预处理测试"""

    @pytest.mark.parametrize(
        ("hint", "expected"),
        [
            (ColorHint.AUTO, "RGBA"),
            (ColorHint.RGB, "RGB"),
            (ColorHint.GRAY, "L"),
            (ColorHint.BINARY, "1"),
        ],
    )
    def test_apply_color_hint(self, hint, expected):
        img = Image.new("RGBA", (8, 8), (10, 200, 30, 128))
        assert apply_color_hint(img, hint).mode == expected

    def test_binary_is_threshold_without_dither(self):
        """二值化使用固定阈值：均匀灰度得到均匀结果"""
        img = Image.new("L", (16, 16), 100)
        binary = apply_color_hint(img, ColorHint.BINARY)
        assert set(binary.getdata()) == {0}

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("RGB", "RGB"),
            ("L", "L"),
            ("1", "L"),
            ("I;16", "L"),
            ("F", "L"),
            ("RGBA", "RGB"),
            ("P", "RGB"),
            ("CMYK", "RGB"),
        ],
    )
    def test_prepare_for_jpeg(self, mode, expected):
        assert prepare_for_jpeg(Image.new(mode, (4, 4))).mode == expected

    def test_alpha_composited_on_white(self):
        img = Image.new("RGBA", (2, 2), (0, 0, 0, 0))
        assert prepare_for_jpeg(img).getpixel((0, 0)) == (255, 255, 255)


class TestHighDepthGray:
    """高位深灰度转换测试"""

    def test_16bit_scaled_by_depth(self):
        img = Image.new("I;16", (4, 4), 40000)
        assert prepare_for_jpeg(img).getpixel((0, 0)) == pytest.approx(155, abs=1)
        assert prepare_for_lossless(img, frozenset({"L"})).getpixel((0, 0)) == (
            pytest.approx(155, abs=1)
        )

    def test_wide_range_stretched(self):
        """I 模式超出 0-255 时按实际范围拉伸"""
        img = Image.linear_gradient("L").convert("I").point(lambda v: v * 4)
        assert prepare_for_lossless(img, frozenset({"L"})).getextrema() == (0, 255)

    def test_8bit_range_kept(self):
        img = Image.new("I", (4, 4), 100)
        assert prepare_for_jpeg(img).getpixel((0, 0)) == 100

    def test_binary_hint_on_16bit(self):
        """16-bit 暗灰（约 78）二值化为黑色，不会被截断为白色"""
        img = Image.new("I;16", (4, 4), 20000)
        assert set(apply_color_hint(img, ColorHint.BINARY).getdata()) == {0}
