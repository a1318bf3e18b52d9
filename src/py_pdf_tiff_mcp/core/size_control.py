"""尺寸控制搜索模块。

按调用方给定的顺序逐组尝试质量参数，每次尝试都把整份文档重新编码到新的缓冲区：
第一组满足字节上限的结果被提交，之后的参数不再尝试；全部超出上限时提交最后一组的结果。
"""

import logging
from collections.abc import Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..models.conversion_result import SearchState, TrialRecord
from ..models.quality_profile import QualityProfile
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .page_encoder import EncodedDocument


logger = get_logger()


class SearchOutcome(BaseModel):
    """尺寸控制搜索结果"""

    model_config = ConfigDict(frozen=True)

    document: EncodedDocument
    profile_index: int = Field(ge=0, description="被提交的参数序号")
    state: SearchState
    trials: list[TrialRecord] = Field(default_factory=list)


class SizeControlSearch:
    """尺寸控制搜索控制器

    状态：TRYING(i) → COMMITTED 或 EXHAUSTED_FALLBACK。
    单次尝试中的致命错误直接向外抛出，整个转换中止。
    """

    def __init__(
        self,
        profiles: Sequence[QualityProfile],
        max_file_size: int,
        sink: logging.Logger | None = None,
    ):
        if not profiles:
            raise ValueError("质量参数列表不能为空")
        if max_file_size <= 0:
            raise ValueError(f"max_file_size 必须为正数，得到: {max_file_size}")

        self.profiles = tuple(profiles)
        self.max_file_size = max_file_size
        self.logger = sink or logger

        self.state = SearchState.TRYING
        self.current_index = 0

    def run(
        self, encode_trial: Callable[[QualityProfile], EncodedDocument]
    ) -> SearchOutcome:
        """执行搜索

        Args:
            encode_trial: 使用给定质量参数完整编码一次文档，每次调用返回新的缓冲区

        Returns:
            SearchOutcome: 被提交的编码结果及搜索过程记录
        """
        total = len(self.profiles)
        trials: list[TrialRecord] = []
        document: EncodedDocument | None = None

        for index, profile in enumerate(self.profiles):
            self.state = SearchState.TRYING
            self.current_index = index
            self.logger.debug(f"尝试第 {index + 1}/{total} 组参数: {profile.describe()}")

            document = encode_trial(profile)
            within_budget = document.size <= self.max_file_size
            trials.append(
                TrialRecord(
                    profile_index=index,
                    output_size=document.size,
                    within_budget=within_budget,
                )
            )
            self.logger.info(
                MessageFormatter.trial_size(
                    index + 1, total, document.size, self.max_file_size
                )
            )

            if within_budget:
                self.state = SearchState.COMMITTED
                self.logger.info(f"第 {index + 1} 组参数满足尺寸上限，提交结果")
                return SearchOutcome(
                    document=document,
                    profile_index=index,
                    state=self.state,
                    trials=trials,
                )

        # 所有参数都超出上限：提交最后一组的结果
        self.state = SearchState.EXHAUSTED_FALLBACK
        self.logger.warning(
            f"全部 {total} 组参数均超出尺寸上限，提交最后一组的结果 "
            f"({document.size} > {self.max_file_size} bytes)"
        )
        return SearchOutcome(
            document=document,
            profile_index=total - 1,
            state=self.state,
            trials=trials,
        )
