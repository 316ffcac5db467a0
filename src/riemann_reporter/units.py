# -*- coding: utf-8 -*-
"""
时间单位换算

- 速率：events/second → events/<unit>，convert_rate(x) = x * 每单位秒数
- 耗时：nanoseconds → <unit>，convert_duration(x) = x / 每单位纳秒数
"""

from enum import Enum
from typing import Union

from riemann_reporter.errors import ConfigError


class TimeUnit(str, Enum):
    """时间单位枚举"""
    NANOSECONDS = "nanoseconds"
    MICROSECONDS = "microseconds"
    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def nanos(self) -> int:
        """每单位纳秒数"""
        return _NANOS_PER_UNIT[self]

    @property
    def seconds(self) -> float:
        """每单位秒数"""
        return self.nanos / _NANOS_PER_SECOND

    @classmethod
    def parse(cls, value: Union[str, "TimeUnit"]) -> "TimeUnit":
        """
        解析时间单位

        支持枚举值（"seconds"）及缩写（"s"、"ms"、"us"、"ns"、"m"、"min"、"h"、"d"）。

        Args:
            value: 单位名称或 TimeUnit

        Returns:
            TimeUnit 实例

        Raises:
            ConfigError: 无法识别的单位
        """
        if isinstance(value, TimeUnit):
            return value
        if not isinstance(value, str):
            raise ConfigError(f"invalid time unit: {value!r}")

        key = value.strip().lower()
        unit = _ALIASES.get(key)
        if unit is None:
            try:
                unit = cls(key)
            except ValueError:
                raise ConfigError(f"unknown time unit: {value!r}")
        return unit


_NANOS_PER_SECOND = 1_000_000_000

_NANOS_PER_UNIT = {
    TimeUnit.NANOSECONDS: 1,
    TimeUnit.MICROSECONDS: 1_000,
    TimeUnit.MILLISECONDS: 1_000_000,
    TimeUnit.SECONDS: _NANOS_PER_SECOND,
    TimeUnit.MINUTES: 60 * _NANOS_PER_SECOND,
    TimeUnit.HOURS: 3600 * _NANOS_PER_SECOND,
    TimeUnit.DAYS: 86400 * _NANOS_PER_SECOND,
}

_ALIASES = {
    "ns": TimeUnit.NANOSECONDS,
    "us": TimeUnit.MICROSECONDS,
    "ms": TimeUnit.MILLISECONDS,
    "s": TimeUnit.SECONDS,
    "m": TimeUnit.MINUTES,
    "min": TimeUnit.MINUTES,
    "h": TimeUnit.HOURS,
    "d": TimeUnit.DAYS,
}


def convert_rate(rate: float, unit: TimeUnit) -> float:
    """
    速率换算

    Args:
        rate: 每秒事件数
        unit: 目标时间单位

    Returns:
        每 unit 事件数
    """
    return rate * unit.seconds


def convert_duration(duration: float, unit: TimeUnit) -> float:
    """
    耗时换算

    Args:
        duration: 纳秒
        unit: 目标时间单位

    Returns:
        以 unit 表示的耗时
    """
    return duration / unit.nanos
