"""尺寸控制计划模型。

按调用方给定的顺序尝试多组质量参数，直到输出不超过字节上限。
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

from .quality_profile import QualityProfile


class SizeControlPlan(BaseModel):
    """尺寸控制计划

    必须且只能提供一组输入输出：文件对 (source_path, dest_path)
    或流对 (source_stream, dest_stream)。
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    profiles: list[QualityProfile] = Field(
        min_length=1, description="按顺序尝试的质量参数，顺序由调用方决定"
    )
    max_file_size: PositiveInt = Field(description="最大输出字节数")

    source_path: Path | None = Field(None, description="输入文件路径")
    dest_path: Path | None = Field(None, description="输出文件路径")
    source_stream: Any = Field(None, description="输入二进制流")
    dest_stream: Any = Field(None, description="输出二进制流")

    render_dpi: PositiveInt | None = Field(
        None, description="PDF 光栅化分辨率，None 使用配置默认值"
    )

    @model_validator(mode="after")
    def validate_io_pair(self) -> "SizeControlPlan":
        is_file_pair = self.source_path is not None and self.dest_path is not None
        is_stream_pair = self.source_stream is not None and self.dest_stream is not None

        if is_file_pair == is_stream_pair:
            raise ValueError(
                "必须且只能提供 source_path/dest_path 或 source_stream/dest_stream 其中一组"
            )

        if is_stream_pair:
            if not callable(getattr(self.source_stream, "read", None)):
                raise ValueError("source_stream 必须是可读的二进制流")
            if not callable(getattr(self.dest_stream, "write", None)):
                raise ValueError("dest_stream 必须是可写的二进制流")

        return self

    @property
    def is_file_pair(self) -> bool:
        return self.source_path is not None and self.dest_path is not None

    @property
    def is_stream_pair(self) -> bool:
        return self.source_stream is not None and self.dest_stream is not None
