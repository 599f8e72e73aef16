"""按时间段分页执行器（已声明，尚未实现）"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...common.exceptions import StrategyNotImplementedError
from ..models import PaginationType, TimeBasedConfig
from .base import PaginationExecutor

if TYPE_CHECKING:
    from ..context import PaginationContext


class TimeBasedExecutor(PaginationExecutor[TimeBasedConfig]):
    async def execute(self, ctx: "PaginationContext") -> None:
        raise StrategyNotImplementedError(PaginationType.TIME_BASED.value)
