"""配置构建器模块。

把松散的调用参数（MCP 工具参数、字典列表）构建为经过校验的质量参数与尺寸控制计划。
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import get_config
from ..exceptions import ValidationError as CustomValidationError
from ..models.quality_profile import QualityProfile
from ..models.size_control import SizeControlPlan


config = get_config()


class ConfigBuilder:
    """质量参数 / 尺寸控制计划构建器

    pydantic 的校验错误统一转换为项目的 ValidationError。
    """

    def build_profile(
        self,
        compression: str | None = "auto",
        jpeg_quality: float | None = None,
        target_dpi: int | None = None,
        color_hint: str | None = "auto",
    ) -> QualityProfile:
        """构建单组质量参数

        Args:
            compression: auto / jpeg / lossless / ccitt
            jpeg_quality: 有损质量因子 0.0-1.0，None 使用配置默认值
            target_dpi: 目标分辨率，None 保持原分辨率
            color_hint: auto / rgb / gray / binary

        Raises:
            CustomValidationError: 参数验证失败
        """
        try:
            return QualityProfile(
                compression=(compression or "auto").lower(),
                jpeg_quality=(
                    jpeg_quality
                    if jpeg_quality is not None
                    else config.conversion.JPEG_QUALITY
                ),
                target_dpi=target_dpi,
                color_hint=(color_hint or "auto").lower(),
            )
        except PydanticValidationError as e:
            raise CustomValidationError(self._format_validation_error(e)) from e

    def build_profiles(
        self, profiles: Sequence[dict[str, Any]] | None = None, **single: Any
    ) -> list[QualityProfile]:
        """构建有序的质量参数列表

        提供 profiles 时按原顺序逐个构建，否则使用单组参数 single。
        """
        if profiles is None:
            return [self.build_profile(**single)]
        if not profiles:
            raise CustomValidationError("质量参数列表不能为空")

        built: list[QualityProfile] = []
        for position, item in enumerate(profiles):
            if not isinstance(item, dict):
                raise CustomValidationError(
                    f"profiles[{position}] 必须为对象，得到: {type(item).__name__}"
                )
            try:
                built.append(self.build_profile(**item))
            except TypeError as e:
                raise CustomValidationError(f"profiles[{position}]: {e}") from e
            except CustomValidationError as e:
                raise CustomValidationError(f"profiles[{position}]: {e.message}") from e
        return built

    def build_plan(
        self,
        profiles: Sequence[QualityProfile],
        max_file_size: int,
        source_path: str | Path | None = None,
        dest_path: str | Path | None = None,
        source_stream: Any = None,
        dest_stream: Any = None,
        render_dpi: int | None = None,
    ) -> SizeControlPlan:
        """构建尺寸控制计划

        Raises:
            CustomValidationError: 参数验证失败
        """
        try:
            return SizeControlPlan(
                profiles=list(profiles),
                max_file_size=max_file_size,
                source_path=Path(source_path) if source_path else None,
                dest_path=Path(dest_path) if dest_path else None,
                source_stream=source_stream,
                dest_stream=dest_stream,
                render_dpi=render_dpi,
            )
        except PydanticValidationError as e:
            raise CustomValidationError(
                self._format_validation_error(e),
                Path(source_path) if source_path else None,
            ) from e

    def _format_validation_error(self, error: PydanticValidationError) -> str:
        """格式化验证错误"""
        messages = []
        for err in error.errors():
            field = ".".join(str(loc) for loc in err["loc"])
            msg = err["msg"]
            if field:
                messages.append(f"{field}: {msg}")
            else:
                messages.append(msg)
        return "; ".join(messages)
