"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionDefaults:
    """转换相关的默认配置"""

    # PDF 光栅化分辨率
    RENDER_DPI: int = 300
    MIN_RENDER_DPI: int = 10
    MAX_RENDER_DPI: int = 1200

    # 有损质量因子 (0.0-1.0)
    JPEG_QUALITY: float = 0.8

    # TIFF 缺失分辨率元数据时使用的 DPI
    FALLBACK_DPI: float = 72.0

    def clamp_render_dpi(self, dpi: int) -> int:
        """将光栅化分辨率限制在允许范围内"""
        return max(self.MIN_RENDER_DPI, min(dpi, self.MAX_RENDER_DPI))


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.conversion = ConversionDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        if render_dpi := os.getenv("PDF_TIFF_RENDER_DPI"):
            object.__setattr__(self.conversion, "RENDER_DPI", int(render_dpi))

        if jpeg_quality := os.getenv("PDF_TIFF_JPEG_QUALITY"):
            quality = float(jpeg_quality)
            if not 0.0 <= quality <= 1.0:
                raise ValueError(
                    f"PDF_TIFF_JPEG_QUALITY 必须在 0.0-1.0 之间，得到: {jpeg_quality}"
                )
            object.__setattr__(self.conversion, "JPEG_QUALITY", quality)

        if log_level := os.getenv("PDF_TIFF_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
