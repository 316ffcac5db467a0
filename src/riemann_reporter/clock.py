# -*- coding: utf-8 -*-
"""时钟：为上报周期提供当前时间（毫秒）"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """时钟基类"""

    @abstractmethod
    def get_time(self) -> int:
        """
        获取当前时间

        Returns:
            自 epoch 起的毫秒数
        """
        pass


class SystemClock(Clock):
    """系统时钟"""

    def get_time(self) -> int:
        return time.time_ns() // 1_000_000


DEFAULT_CLOCK = SystemClock()
