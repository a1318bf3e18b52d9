"""MCP 服务器层测试。

直接调用工具共用的执行逻辑，不经过 MCP 协议。
"""

from pathlib import Path

from py_pdf_tiff_mcp.exceptions import ProcessingError, ValidationError
from py_pdf_tiff_mcp.mcp_server import MCPResponseBuilder, _run_conversion
from py_pdf_tiff_mcp.models import DocumentFormats


DEFAULT_ARGS = {
    "compression": "auto",
    "jpeg_quality": None,
    "target_dpi": None,
    "color_hint": "auto",
}


class TestRunConversion:
    """转换工具执行逻辑测试"""

    def test_pdf_to_tiff_default_output_path(self, pdf_file: Path):
        response = _run_conversion(
            DocumentFormats.TIFF, str(pdf_file), None, DEFAULT_ARGS, None, None, dpi=72
        )

        assert response["success"] is True
        result = response["result"]
        assert result["output_path"] == str(pdf_file.with_suffix(".tiff"))
        assert result["page_count"] == 2
        assert "size_control" not in result
        assert Path(result["output_path"]).exists()

    def test_tiff_to_pdf_with_size_control(self, tiff_file: Path, temp_dir: Path):
        output = temp_dir / "out.pdf"
        response = _run_conversion(
            DocumentFormats.PDF,
            str(tiff_file),
            str(output),
            DEFAULT_ARGS,
            1,
            [
                {"compression": "lossless"},
                {"compression": "jpeg", "jpeg_quality": 0.2, "target_dpi": 50},
            ],
        )

        assert response["success"] is True
        size_control = response["result"]["size_control"]
        assert size_control["state"] == "exhausted_fallback"
        assert size_control["profile_index"] == 1
        assert size_control["within_budget"] is False
        assert len(size_control["trials"]) == 2
        assert output.read_bytes()[:4] == b"%PDF"

    def test_multiple_profiles_require_limit(self, tiff_file: Path):
        response = _run_conversion(
            DocumentFormats.PDF,
            str(tiff_file),
            None,
            DEFAULT_ARGS,
            None,
            [{"compression": "jpeg"}, {"compression": "lossless"}],
        )
        assert response["success"] is False
        assert response["error_type"] == "validation"

    def test_invalid_profile_reports_position(self, tiff_file: Path):
        response = _run_conversion(
            DocumentFormats.PDF,
            str(tiff_file),
            None,
            DEFAULT_ARGS,
            1000,
            [{"compression": "lossless"}, {"jpeg_quality": 2.0}],
        )
        assert response["error_type"] == "validation"
        assert "profiles[1]" in response["error"]

    def test_missing_input(self, temp_dir: Path):
        missing = str(temp_dir / "missing.pdf")
        response = _run_conversion(
            DocumentFormats.TIFF, missing, None, DEFAULT_ARGS, None, None
        )
        assert response["error_type"] == "file"
        assert response["details"] == {"file_path": missing}


class TestMCPResponseBuilder:
    """响应构建器测试"""

    def test_error_without_details(self):
        assert MCPResponseBuilder.error("boom") == {
            "success": False,
            "error": "boom",
            "error_type": "general",
        }

    def test_from_exception_types(self):
        cases = [
            (ValidationError("bad"), "validation"),
            (FileNotFoundError("gone"), "file"),
            (ProcessingError("broken"), "processing"),
        ]
        for error, error_type in cases:
            response = MCPResponseBuilder.from_exception(error, "in.pdf", "TIFF", "转换")
            assert response["success"] is False
            assert response["error_type"] == error_type
