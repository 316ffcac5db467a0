# -*- coding: utf-8 -*-
"""
Riemann 指标上报器

将指标快照展开为一批 Riemann 事件并一次发送：
- Gauge：1 个事件（原名）
- Counter：1 个事件（count）
- Histogram：11 个事件（count、max、mean、min、stddev、p50 ... p999）
- Meter：5 个事件（count、m1_rate、m5_rate、m15_rate、mean_rate）
- Timer：15 个事件（Histogram 字段按耗时换算 + 4 个速率）

上报失败只记录告警，不向调度器抛出异常。
"""

import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from riemann_reporter.clock import DEFAULT_CLOCK, Clock
from riemann_reporter.errors import RiemannReporterError, UnsupportedValueError
from riemann_reporter.event import Event, Metric
from riemann_reporter.riemann import DEFAULT_TTL, Riemann
from riemann_reporter.snapshot import (
    ALL,
    CounterSnapshot,
    GaugeValue,
    HistogramSnapshot,
    MeterSnapshot,
    MetricFilter,
    MetricRegistry,
    MetricSnapshot,
    Statistics,
    TimerSnapshot,
    is_int64,
)
from riemann_reporter.units import TimeUnit, convert_duration, convert_rate

if TYPE_CHECKING:
    from riemann_reporter.config import ReporterConfig

logger = logging.getLogger(__name__)

# 统计字段顺序：(后缀, Statistics 属性名)
STATISTICS_FIELDS = (
    ("max", "max"),
    ("mean", "mean"),
    ("min", "min"),
    ("stddev", "stddev"),
    ("p50", "p50"),
    ("p75", "p75"),
    ("p95", "p95"),
    ("p98", "p98"),
    ("p99", "p99"),
    ("p999", "p999"),
)

RATE_FIELDS = ("m1_rate", "m5_rate", "m15_rate", "mean_rate")


class UnsupportedGaugePolicy(str, Enum):
    """
    Gauge 值类型不受支持时的处理策略

    - SKIP：跳过该指标并告警，本周期其余指标照常上报
    - ABORT：放弃整个周期，不发送任何事件
    """
    SKIP = "skip"
    ABORT = "abort"


def _identity(value: float) -> float:
    return value


class RiemannReporter:
    """
    Riemann 指标上报器

    由外部调度器（如 ReportScheduler）按固定周期调用 report()。
    配置在构造后不可变，周期之间不保存状态。

    示例:
        ```python
        riemann = Riemann("riemann.local", 5555)
        reporter = RiemannReporter(
            riemann,
            registry=registry,
            rate_unit=TimeUnit.SECONDS,
            duration_unit=TimeUnit.MILLISECONDS,
            ttl=30.0,
        )
        reporter.report()
        reporter.close()
        ```
    """

    def __init__(
        self,
        riemann: Riemann,
        registry: Optional[MetricRegistry] = None,
        metric_filter: MetricFilter = ALL,
        clock: Clock = DEFAULT_CLOCK,
        rate_unit: TimeUnit = TimeUnit.SECONDS,
        duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
        ttl: float = DEFAULT_TTL,
        unsupported_gauge_policy: UnsupportedGaugePolicy = UnsupportedGaugePolicy.SKIP,
    ):
        """
        初始化上报器

        Args:
            riemann: Riemann 连接适配器
            registry: 指标注册表，report() 未传入快照时从此获取
            metric_filter: 指标过滤器，由注册表在生成快照时应用
            clock: 时钟
            rate_unit: 速率换算单位
            duration_unit: 耗时换算单位
            ttl: 事件存活时间（秒）
            unsupported_gauge_policy: 不支持的 Gauge 值处理策略
        """
        self._riemann = riemann
        self._registry = registry
        self._metric_filter = metric_filter
        self._clock = clock
        self._rate_unit = TimeUnit.parse(rate_unit)
        self._duration_unit = TimeUnit.parse(duration_unit)
        self._ttl = float(ttl)
        self._unsupported_gauge_policy = UnsupportedGaugePolicy(unsupported_gauge_policy)
        self._lock = threading.Lock()

        riemann.set_default_ttl(self._ttl)

    @classmethod
    def from_config(
        cls,
        config: "ReporterConfig",
        registry: Optional[MetricRegistry] = None,
        metric_filter: MetricFilter = ALL,
        clock: Clock = DEFAULT_CLOCK,
        riemann: Optional[Riemann] = None,
    ) -> "RiemannReporter":
        """
        根据配置创建上报器

        Args:
            config: 上报器配置
            registry: 指标注册表
            metric_filter: 指标过滤器
            clock: 时钟
            riemann: 连接适配器，默认按 config.riemann 创建

        Returns:
            RiemannReporter 实例
        """
        if riemann is None:
            riemann = Riemann(
                host=config.riemann.host,
                port=config.riemann.port,
                timeout=config.riemann.timeout_seconds,
            )
        return cls(
            riemann,
            registry=registry,
            metric_filter=metric_filter,
            clock=clock,
            rate_unit=config.rate_unit,
            duration_unit=config.duration_unit,
            ttl=config.ttl,
            unsupported_gauge_policy=config.unsupported_gauge_policy,
        )

    @property
    def riemann(self) -> Riemann:
        return self._riemann

    @property
    def rate_unit(self) -> TimeUnit:
        return self._rate_unit

    @property
    def duration_unit(self) -> TimeUnit:
        return self._duration_unit

    @property
    def ttl(self) -> float:
        return self._ttl

    def convert_rate(self, rate: float) -> float:
        return convert_rate(rate, self._rate_unit)

    def convert_duration(self, duration: float) -> float:
        return convert_duration(duration, self._duration_unit)

    def report(self, snapshot: Optional[MetricSnapshot] = None) -> int:
        """
        执行一次上报

        Args:
            snapshot: 指标快照，None 时从注册表获取

        Returns:
            发送的事件数，本周期失败时为 0
        """
        timestamp = self._clock.get_time() // 1000
        logger.debug("Reporting metrics: timestamp=%d", timestamp)

        with self._lock:
            try:
                self._riemann.connect()
            except RiemannReporterError as e:
                logger.warning("Unable to connect to %r, skip this report: %s", self._riemann, e)
                return 0

            try:
                if snapshot is None:
                    snapshot = self._pull_snapshot()
                events = self.build_events(snapshot, timestamp)
                self._riemann.send_events(events)
            except RiemannReporterError as e:
                logger.warning("Unable to report to %r: %s", self._riemann, e)
                return 0
            except Exception:
                logger.exception("Unexpected error in report cycle: riemann=%r", self._riemann)
                return 0

        logger.debug("Reported metrics: timestamp=%d, events=%d", timestamp, len(events))
        return len(events)

    def _pull_snapshot(self) -> MetricSnapshot:
        if self._registry is None:
            return MetricSnapshot()
        return self._registry.snapshot(self._metric_filter)

    def build_events(self, snapshot: MetricSnapshot, timestamp: int) -> List[Event]:
        """
        将快照展开为事件列表

        顺序：gauges、counters、histograms、meters、timers，每类按名称排序。

        Args:
            snapshot: 指标快照
            timestamp: 本周期时间戳（epoch 秒）

        Returns:
            事件列表

        Raises:
            UnsupportedValueError: 策略为 ABORT 且存在不支持的 Gauge 值
            NotConnectedError: 未连接
        """
        events: List[Event] = []

        for name, gauge in snapshot.gauges.items():
            event = self._report_gauge(name, gauge, timestamp)
            if event is not None:
                events.append(event)

        for name, counter in snapshot.counters.items():
            if not self._check_count("counter", name, counter.count):
                continue
            events.append(self._report_counter(name, counter, timestamp))

        for name, histogram in snapshot.histograms.items():
            if not self._check_count("histogram", name, histogram.count):
                continue
            events.extend(self._report_histogram(name, histogram, timestamp))

        for name, meter in snapshot.meters.items():
            if not self._check_count("meter", name, meter.count):
                continue
            events.extend(self._report_meter(name, meter, timestamp))

        for name, timer in snapshot.timers.items():
            if not self._check_count("timer", name, timer.count):
                continue
            events.extend(self._report_timer(name, timer, timestamp))

        return events

    def _check_count(self, kind: str, name: str, count: int) -> bool:
        # count 以 sint64 发送，超出范围时跳过整个指标
        if is_int64(int(count)):
            return True
        logger.warning("Skip %s with out-of-range count: name=%s, count=%d", kind, name, count)
        return False

    def _event(self, service: str, metric: Metric, timestamp: int) -> Event:
        return self._riemann.event(service, ttl=self._ttl).metric(metric).time(timestamp).build()

    def _report_gauge(self, name: str, gauge: GaugeValue, timestamp: int) -> Optional[Event]:
        gauge = GaugeValue.of(gauge)
        try:
            metric = gauge.to_metric(name)
        except UnsupportedValueError:
            if self._unsupported_gauge_policy == UnsupportedGaugePolicy.ABORT:
                raise
            logger.warning(
                "Skip gauge with unsupported value: name=%s, type=%s",
                name,
                type(gauge.value).__name__,
            )
            return None
        return self._event(name, metric, timestamp)

    def _report_counter(self, name: str, counter: CounterSnapshot, timestamp: int) -> Event:
        return self._event(f"{name} count", int(counter.count), timestamp)

    def _report_histogram(
        self, name: str, histogram: HistogramSnapshot, timestamp: int
    ) -> List[Event]:
        return self._statistics_events(
            name, histogram.count, histogram.statistics, _identity, timestamp
        )

    def _report_meter(self, name: str, meter: MeterSnapshot, timestamp: int) -> List[Event]:
        events = [self._event(f"{name} count", int(meter.count), timestamp)]
        events.extend(self._rate_events(name, meter, timestamp))
        return events

    def _report_timer(self, name: str, timer: TimerSnapshot, timestamp: int) -> List[Event]:
        events = self._statistics_events(
            name, timer.count, timer.statistics, self.convert_duration, timestamp
        )
        events.extend(self._rate_events(name, timer, timestamp))
        return events

    def _statistics_events(
        self,
        name: str,
        count: int,
        statistics: Statistics,
        convert: Callable[[float], float],
        timestamp: int,
    ) -> List[Event]:
        # count 不做换算
        events = [self._event(f"{name} count", int(count), timestamp)]
        for suffix, attr in STATISTICS_FIELDS:
            value = convert(float(getattr(statistics, attr)))
            events.append(self._event(f"{name} {suffix}", value, timestamp))
        return events

    def _rate_events(
        self, name: str, metered: Union[MeterSnapshot, TimerSnapshot], timestamp: int
    ) -> List[Event]:
        return [
            self._event(
                f"{name} {attr}",
                self.convert_rate(float(getattr(metered, attr))),
                timestamp,
            )
            for attr in RATE_FIELDS
        ]

    def close(self) -> None:
        """关闭 Riemann 连接"""
        with self._lock:
            self._riemann.close()

    def __enter__(self) -> "RiemannReporter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
