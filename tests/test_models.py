"""数据模型测试。"""

from io import BytesIO

import pydantic
import pytest
from PIL import Image

from py_pdf_tiff_mcp.config import AppConfig, get_config, reset_config
from py_pdf_tiff_mcp.engine.config import ConfigBuilder
from py_pdf_tiff_mcp.exceptions import ValidationError
from py_pdf_tiff_mcp.models import (
    ColorHint,
    Compression,
    ConversionResult,
    PageImage,
    QualityProfile,
    SearchState,
    SizeControlPlan,
    TrialRecord,
)


class TestQualityProfile:
    """质量参数模型测试"""

    def test_defaults(self):
        """默认值：AUTO / 0.8 / 保持分辨率 / AUTO"""
        profile = QualityProfile()
        assert profile.compression is Compression.AUTO
        assert profile.jpeg_quality == 0.8
        assert profile.target_dpi is None
        assert profile.color_hint is ColorHint.AUTO

    @pytest.mark.parametrize("quality", [-0.01, 1.01, 5])
    def test_quality_out_of_range_rejected(self, quality):
        """质量因子越界在构造时即被拒绝"""
        with pytest.raises(pydantic.ValidationError):
            QualityProfile(jpeg_quality=quality)

    def test_target_dpi_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            QualityProfile(target_dpi=0)

    def test_immutable(self):
        """质量参数不可变"""
        profile = QualityProfile()
        with pytest.raises(pydantic.ValidationError):
            profile.jpeg_quality = 0.5

    @pytest.mark.parametrize(
        ("quality", "expected"), [(0.0, 1), (0.004, 1), (0.5, 50), (0.8, 80), (1.0, 100)]
    )
    def test_quality_percent_mapping(self, quality, expected):
        assert QualityProfile(jpeg_quality=quality).jpeg_quality_percent == expected


class TestPageImage:
    """页面模型测试"""

    def test_defaults_and_physical_size(self):
        page = PageImage(image=Image.new("RGB", (144, 72)))
        assert page.dpi_x == page.dpi_y == 72.0
        assert page.orientation == 1
        assert page.width_inches == pytest.approx(2.0)
        assert (page.width_points, page.height_points) == pytest.approx((144.0, 72.0))

    @pytest.mark.parametrize("orientation", [0, 9])
    def test_orientation_range(self, orientation):
        with pytest.raises(pydantic.ValidationError):
            PageImage(image=Image.new("L", (4, 4)), orientation=orientation)

    def test_resolution_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            PageImage(image=Image.new("L", (4, 4)), dpi_x=0)

    def test_derive_keeps_metadata(self):
        """派生页面沿用原元数据，原对象不变"""
        page = PageImage(image=Image.new("L", (4, 4)), dpi_x=200, dpi_y=100, index=3)
        derived = page.derive(Image.new("L", (2, 2)), dpi_x=50.0)
        assert derived.index == 3
        assert derived.dpi_x == 50.0
        assert derived.dpi_y == 100
        assert page.size == (4, 4)


class TestSizeControlPlan:
    """尺寸控制计划测试"""

    def test_stream_pair(self):
        plan = SizeControlPlan(
            profiles=[QualityProfile()],
            max_file_size=1000,
            source_stream=BytesIO(b"x"),
            dest_stream=BytesIO(),
        )
        assert plan.is_stream_pair
        assert not plan.is_file_pair

    def test_empty_profiles_rejected(self):
        """空参数列表在构造时被拒绝"""
        with pytest.raises(pydantic.ValidationError):
            SizeControlPlan(
                profiles=[],
                max_file_size=1000,
                source_stream=BytesIO(),
                dest_stream=BytesIO(),
            )

    def test_non_positive_budget_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            SizeControlPlan(
                profiles=[QualityProfile()],
                max_file_size=0,
                source_stream=BytesIO(),
                dest_stream=BytesIO(),
            )

    def test_io_pair_required(self, temp_dir):
        """必须且只能提供一组输入输出"""
        with pytest.raises(pydantic.ValidationError):
            SizeControlPlan(profiles=[QualityProfile()], max_file_size=10)

        with pytest.raises(pydantic.ValidationError):
            SizeControlPlan(
                profiles=[QualityProfile()],
                max_file_size=10,
                source_path=temp_dir / "a.pdf",
                dest_path=temp_dir / "b.tiff",
                source_stream=BytesIO(),
                dest_stream=BytesIO(),
            )

    def test_profile_order_preserved(self):
        profiles = [QualityProfile(jpeg_quality=q) for q in (0.2, 0.9, 0.5)]
        plan = SizeControlPlan(
            profiles=profiles,
            max_file_size=10,
            source_stream=BytesIO(),
            dest_stream=BytesIO(),
        )
        assert [p.jpeg_quality for p in plan.profiles] == [0.2, 0.9, 0.5]


class TestConversionResult:
    """转换结果测试"""

    def test_within_budget(self):
        result = ConversionResult(
            success=True,
            output_format="TIFF",
            output_size=2048,
            page_count=2,
            max_file_size=1024,
            profile_index=1,
            search_state=SearchState.EXHAUSTED_FALLBACK,
            trials=[
                TrialRecord(profile_index=0, output_size=4096, within_budget=False),
                TrialRecord(profile_index=1, output_size=2048, within_budget=False),
            ],
        )
        assert result.within_budget is False
        assert "超出" in result.get_summary()
        assert result.get_output_size_human() == "2.0 KiB"

    def test_without_size_control(self):
        result = ConversionResult(success=True, output_format="PDF", output_size=10)
        assert result.within_budget is None
        assert result.is_successful()


class TestConfigBuilder:
    """配置构建器测试"""

    def test_build_profile_from_strings(self):
        profile = ConfigBuilder().build_profile(
            compression="JPEG", jpeg_quality=0.5, target_dpi=150, color_hint="Gray"
        )
        assert profile.compression is Compression.JPEG
        assert profile.color_hint is ColorHint.GRAY
        assert profile.target_dpi == 150

    def test_invalid_values_raise_project_error(self):
        """pydantic 错误转换为项目的 ValidationError"""
        with pytest.raises(ValidationError, match="jpeg_quality"):
            ConfigBuilder().build_profile(jpeg_quality=2.0)

        with pytest.raises(ValidationError):
            ConfigBuilder().build_profile(compression="jbig2")

    def test_build_profiles_keeps_order(self):
        profiles = ConfigBuilder().build_profiles(
            [{"compression": "lossless"}, {"compression": "jpeg", "jpeg_quality": 0.3}]
        )
        assert [p.compression for p in profiles] == [
            Compression.LOSSLESS,
            Compression.JPEG,
        ]

    def test_build_profiles_rejects_unknown_keys(self):
        with pytest.raises(ValidationError, match=r"profiles\[0\]"):
            ConfigBuilder().build_profiles([{"quality": 80}])

    def test_build_plan_rejects_empty_profiles(self):
        with pytest.raises(ValidationError):
            ConfigBuilder().build_plan(
                [], 100, source_stream=BytesIO(), dest_stream=BytesIO()
            )


class TestAppConfig:
    """全局配置测试"""

    @pytest.fixture(autouse=True)
    def restore_config(self):
        yield
        reset_config()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PDF_TIFF_RENDER_DPI", "150")
        monkeypatch.setenv("PDF_TIFF_JPEG_QUALITY", "0.55")
        monkeypatch.setenv("PDF_TIFF_LOG_LEVEL", "debug")
        reset_config()

        config = get_config()
        assert config.conversion.RENDER_DPI == 150
        assert config.conversion.JPEG_QUALITY == pytest.approx(0.55)
        assert config.logging.LOG_LEVEL == "DEBUG"

    def test_quality_out_of_range(self, monkeypatch):
        monkeypatch.setenv("PDF_TIFF_JPEG_QUALITY", "80")
        with pytest.raises(ValueError, match="PDF_TIFF_JPEG_QUALITY"):
            AppConfig()

    @pytest.mark.parametrize(("dpi", "expected"), [(1, 10), (300, 300), (5000, 1200)])
    def test_clamp_render_dpi(self, dpi, expected):
        assert AppConfig().conversion.clamp_render_dpi(dpi) == expected
