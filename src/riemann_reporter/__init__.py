"""
riemann-reporter periodically exports in-process metrics to a Riemann collector.

Each cycle a metric snapshot (gauges, counters, histograms, meters, timers)
is expanded into timestamped, named events and sent in one batch.

Modules:
- riemann_reporter.riemann: Riemann connection adapter
- riemann_reporter.reporter: snapshot translator / reporter
- riemann_reporter.scheduler: fixed-period report scheduler
- riemann_reporter.snapshot: metric snapshot data model
- riemann_reporter.config: configuration (pydantic, YAML)
- riemann_reporter.units: time unit conversion
"""

from riemann_reporter.__version__ import __version__
from riemann_reporter.clock import Clock, SystemClock
from riemann_reporter.config import ReporterConfig, RiemannConfig, load_config
from riemann_reporter.errors import (
    ConfigError,
    ConnectionSetupError,
    NotConnectedError,
    RiemannReporterError,
    TransportError,
    UnsupportedValueError,
)
from riemann_reporter.event import Event, EventBuilder
from riemann_reporter.reporter import RiemannReporter, UnsupportedGaugePolicy
from riemann_reporter.riemann import Riemann
from riemann_reporter.scheduler import ReportScheduler
from riemann_reporter.snapshot import (
    ALL,
    CounterSnapshot,
    GaugeValue,
    HistogramSnapshot,
    MeterSnapshot,
    MetricFilter,
    MetricRegistry,
    MetricSnapshot,
    NumericKind,
    Statistics,
    TimerSnapshot,
)
from riemann_reporter.transport import RiemannClientTransport, Transport
from riemann_reporter.units import TimeUnit

__all__ = [
    "__version__",
    # 核心
    "Riemann",
    "RiemannReporter",
    "ReportScheduler",
    "UnsupportedGaugePolicy",
    # 事件
    "Event",
    "EventBuilder",
    # 快照
    "ALL",
    "CounterSnapshot",
    "GaugeValue",
    "HistogramSnapshot",
    "MeterSnapshot",
    "MetricFilter",
    "MetricRegistry",
    "MetricSnapshot",
    "NumericKind",
    "Statistics",
    "TimerSnapshot",
    # 传输层
    "Transport",
    "RiemannClientTransport",
    # 配置
    "ReporterConfig",
    "RiemannConfig",
    "load_config",
    "TimeUnit",
    "Clock",
    "SystemClock",
    # 异常
    "RiemannReporterError",
    "ConnectionSetupError",
    "NotConnectedError",
    "TransportError",
    "UnsupportedValueError",
    "ConfigError",
]
