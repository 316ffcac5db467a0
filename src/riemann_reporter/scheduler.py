# -*- coding: utf-8 -*-
"""
定时上报调度器

后台线程按固定周期调用 RiemannReporter.report()，周期之间不会重叠。
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional

from riemann_reporter.reporter import RiemannReporter

if TYPE_CHECKING:
    from riemann_reporter.config import ReporterConfig

logger = logging.getLogger(__name__)


class ReportScheduler:
    """
    定时上报调度器

    示例:
        ```python
        scheduler = ReportScheduler(reporter, period=10.0)
        scheduler.start()
        # ...
        scheduler.stop()
        ```
    """

    def __init__(
        self,
        reporter: RiemannReporter,
        period: float,
        initial_delay: Optional[float] = None,
        name: str = "riemann-reporter",
    ):
        """
        初始化调度器

        Args:
            reporter: 上报器
            period: 上报周期（秒）
            initial_delay: 首次上报前的等待时间（秒），默认等于 period
            name: 线程名称
        """
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")

        self._reporter = reporter
        self._period = float(period)
        self._initial_delay = self._period if initial_delay is None else float(initial_delay)
        self._name = name
        self._stop_event = threading.Event()
        self._cycle_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(
        cls,
        config: "ReporterConfig",
        reporter: RiemannReporter,
        initial_delay: Optional[float] = None,
        name: str = "riemann-reporter",
    ) -> "ReportScheduler":
        """按配置中的 period 创建调度器"""
        return cls(reporter, config.period_seconds, initial_delay=initial_delay, name=name)

    @property
    def period(self) -> float:
        return self._period

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """启动后台上报，重复调用无效"""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self._name, daemon=True)
        self._thread.start()
        logger.info(
            "Report scheduler started: name=%s, period=%.3fs, initial_delay=%.3fs",
            self._name,
            self._period,
            self._initial_delay,
        )

    def stop(self, timeout: float = 5.0) -> None:
        """
        停止后台上报

        Args:
            timeout: 等待当前周期结束的最长时间（秒）
        """
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Report scheduler did not stop in %.3fs: name=%s", timeout, self._name)
            self._thread = None
            logger.info("Report scheduler stopped: name=%s", self._name)

    def report_now(self) -> int:
        """立即同步执行一次上报，返回发送的事件数"""
        with self._cycle_lock:
            return self._reporter.report()

    def _run_loop(self) -> None:
        delay = self._initial_delay
        while not self._stop_event.wait(delay):
            try:
                self.report_now()
            except Exception:
                logger.exception("Unexpected error in report cycle: name=%s", self._name)
            delay = self._period

    def __enter__(self) -> "ReportScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
