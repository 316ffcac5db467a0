# -*- coding: utf-8 -*-
"""
指标快照数据模型

每个上报周期消费一份只读快照，包含五类按名称排序的指标：
- gauges：GaugeValue（数值类型的标签联合）
- counters：CounterSnapshot
- histograms：HistogramSnapshot
- meters：MeterSnapshot
- timers：TimerSnapshot

快照由外部指标注册表（MetricRegistry）生成，本模块不做任何采集或统计计算。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

import numpy as np

from riemann_reporter.errors import UnsupportedValueError

# (name, metric) -> 是否上报
MetricFilter = Callable[[str, Any], bool]


def accept_all(name: str, metric: Any) -> bool:
    """默认过滤器：全部上报"""
    return True


ALL: MetricFilter = accept_all

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def is_int64(value: int) -> bool:
    """整数是否可无损写入 sint64"""
    return _INT64_MIN <= value <= _INT64_MAX


class NumericKind(str, Enum):
    """Gauge 值的数值类型"""
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    UNSUPPORTED = "unsupported"

    @property
    def is_integer(self) -> bool:
        return self in (
            NumericKind.INT8,
            NumericKind.INT16,
            NumericKind.INT32,
            NumericKind.INT64,
        )


_NUMPY_KINDS = {
    np.dtype(np.int8): NumericKind.INT8,
    np.dtype(np.int16): NumericKind.INT16,
    np.dtype(np.int32): NumericKind.INT32,
    np.dtype(np.int64): NumericKind.INT64,
    np.dtype(np.float32): NumericKind.FLOAT32,
    np.dtype(np.float64): NumericKind.FLOAT64,
}


@dataclass(frozen=True)
class GaugeValue:
    """
    Gauge 值（标签联合）

    kind 为 UNSUPPORTED 时 value 保留原始对象，便于记录异常。

    示例:
        ```python
        GaugeValue.of(3.5)           # FLOAT64
        GaugeValue.of(np.int16(7))   # INT16
        GaugeValue.of("hot")         # UNSUPPORTED
        ```
    """
    kind: NumericKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> "GaugeValue":
        """根据运行时类型对原始值分类"""
        if isinstance(value, GaugeValue):
            return value
        # bool 是 int 的子类，需要优先排除
        if isinstance(value, (bool, np.bool_)):
            return cls(NumericKind.UNSUPPORTED, value)
        if isinstance(value, np.generic):
            return cls(_NUMPY_KINDS.get(value.dtype, NumericKind.UNSUPPORTED), value)
        if isinstance(value, int):
            if is_int64(value):
                return cls(NumericKind.INT64, value)
            return cls(NumericKind.UNSUPPORTED, value)
        if isinstance(value, float):
            return cls(NumericKind.FLOAT64, value)
        return cls(NumericKind.UNSUPPORTED, value)

    @property
    def is_supported(self) -> bool:
        return self.kind != NumericKind.UNSUPPORTED

    def to_metric(self, name: str = ""):
        """
        转换为事件的 metric 值

        整数类型返回 int，浮点类型返回 float。

        Raises:
            UnsupportedValueError: kind 为 UNSUPPORTED
        """
        if self.kind == NumericKind.UNSUPPORTED:
            raise UnsupportedValueError(name, self.value)
        if self.kind.is_integer:
            return int(self.value)
        return float(self.value)


@dataclass(frozen=True)
class Statistics:
    """统计快照（直方图/计时器共用）"""
    max: float = 0.0
    mean: float = 0.0
    min: float = 0.0
    stddev: float = 0.0
    p50: float = 0.0
    p75: float = 0.0
    p95: float = 0.0
    p98: float = 0.0
    p99: float = 0.0
    p999: float = 0.0


@dataclass(frozen=True)
class CounterSnapshot:
    count: int = 0


@dataclass(frozen=True)
class HistogramSnapshot:
    count: int = 0
    statistics: Statistics = field(default_factory=Statistics)


@dataclass(frozen=True)
class MeterSnapshot:
    """速率单位为 events/second"""
    count: int = 0
    m1_rate: float = 0.0
    m5_rate: float = 0.0
    m15_rate: float = 0.0
    mean_rate: float = 0.0


@dataclass(frozen=True)
class TimerSnapshot:
    """
    计时器快照

    statistics 中的耗时单位为纳秒，速率单位为 calls/second。
    """
    count: int = 0
    statistics: Statistics = field(default_factory=Statistics)
    m1_rate: float = 0.0
    m5_rate: float = 0.0
    m15_rate: float = 0.0
    mean_rate: float = 0.0


def _sorted(metrics: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if not metrics:
        return {}
    return {name: metrics[name] for name in sorted(metrics)}


@dataclass(frozen=True)
class MetricSnapshot:
    """
    指标快照

    五个字典均按名称排序；请使用 MetricSnapshot.of() 构造。
    """
    gauges: Dict[str, GaugeValue] = field(default_factory=dict)
    counters: Dict[str, CounterSnapshot] = field(default_factory=dict)
    histograms: Dict[str, HistogramSnapshot] = field(default_factory=dict)
    meters: Dict[str, MeterSnapshot] = field(default_factory=dict)
    timers: Dict[str, TimerSnapshot] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        gauges: Optional[Mapping[str, Any]] = None,
        counters: Optional[Mapping[str, Any]] = None,
        histograms: Optional[Mapping[str, HistogramSnapshot]] = None,
        meters: Optional[Mapping[str, MeterSnapshot]] = None,
        timers: Optional[Mapping[str, TimerSnapshot]] = None,
    ) -> "MetricSnapshot":
        """
        从普通字典构造快照

        Args:
            gauges: name -> 原始数值或 GaugeValue
            counters: name -> int 或 CounterSnapshot
            histograms: name -> HistogramSnapshot
            meters: name -> MeterSnapshot
            timers: name -> TimerSnapshot

        Returns:
            按名称排序的 MetricSnapshot
        """
        return cls(
            gauges={
                name: GaugeValue.of(value)
                for name, value in _sorted(gauges).items()
            },
            counters={
                name: value if isinstance(value, CounterSnapshot) else CounterSnapshot(int(value))
                for name, value in _sorted(counters).items()
            },
            histograms=_sorted(histograms),
            meters=_sorted(meters),
            timers=_sorted(timers),
        )

    def filtered(self, metric_filter: MetricFilter) -> "MetricSnapshot":
        """返回只包含 metric_filter 接受的指标的新快照"""

        def keep(metrics: Dict[str, Any]) -> Dict[str, Any]:
            return {
                name: metric
                for name, metric in metrics.items()
                if metric_filter(name, metric)
            }

        return MetricSnapshot(
            gauges=keep(self.gauges),
            counters=keep(self.counters),
            histograms=keep(self.histograms),
            meters=keep(self.meters),
            timers=keep(self.timers),
        )

    def __len__(self) -> int:
        return (
            len(self.gauges)
            + len(self.counters)
            + len(self.histograms)
            + len(self.meters)
            + len(self.timers)
        )


class MetricRegistry(Protocol):
    """
    指标注册表（外部协作者）

    每个周期返回一份已按 metric_filter 过滤的快照。
    """

    def snapshot(self, metric_filter: MetricFilter) -> MetricSnapshot:
        ...
