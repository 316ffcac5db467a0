# -*- coding: utf-8 -*-
"""
Riemann 事件

- Event：不可变事件（service、host、metric、ttl、time）
- EventBuilder：链式构建器，由 Riemann.event() 预填 service/host/ttl
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

Metric = Union[int, float]


@dataclass(frozen=True)
class Event:
    """
    Riemann 事件

    Attributes:
        service: 事件名称
        host: 本机主机名
        metric: 指标值（int 或 float）
        ttl: 存活时间（秒）
        time: 时间戳（epoch 秒）
    """
    service: str
    host: str
    metric: Metric
    ttl: float
    time: int

    @property
    def metric_value(self) -> float:
        """以 float 表示的指标值"""
        return float(self.metric)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "service": self.service,
            "host": self.host,
            "metric": self.metric,
            "ttl": self.ttl,
            "time": self.time,
        }


class EventBuilder:
    """
    事件构建器

    示例:
        ```python
        event = (
            EventBuilder()
            .service("requests count")
            .host("web-01")
            .ttl(10.0)
            .metric(42)
            .time(1700000000)
            .build()
        )
        ```
    """

    def __init__(self):
        self._service: Optional[str] = None
        self._host: Optional[str] = None
        self._metric: Optional[Metric] = None
        self._ttl: Optional[float] = None
        self._time: Optional[int] = None

    def service(self, service: str) -> "EventBuilder":
        self._service = service
        return self

    def host(self, host: str) -> "EventBuilder":
        self._host = host
        return self

    def metric(self, metric: Metric) -> "EventBuilder":
        if isinstance(metric, bool) or not isinstance(metric, (int, float)):
            raise TypeError(f"metric must be int or float, got {type(metric).__name__}")
        self._metric = metric
        return self

    def ttl(self, ttl: float) -> "EventBuilder":
        self._ttl = float(ttl)
        return self

    def time(self, time: int) -> "EventBuilder":
        self._time = int(time)
        return self

    def build(self) -> Event:
        """
        构建事件

        Raises:
            ValueError: service、metric 或 time 未设置
        """
        if self._service is None:
            raise ValueError("event service is not set")
        if self._metric is None:
            raise ValueError(f"event metric is not set: service={self._service}")
        if self._time is None:
            raise ValueError(f"event time is not set: service={self._service}")

        return Event(
            service=self._service,
            host=self._host or "",
            metric=self._metric,
            ttl=self._ttl if self._ttl is not None else 0.0,
            time=self._time,
        )
