#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
pytest 配置文件

提供测试夹具和配置
"""

import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# 将 src 目录添加到 Python 路径
ROOT_DIR = Path(__file__).parent.parent
SRC_DIR = ROOT_DIR / "src"
sys.path.insert(0, str(SRC_DIR))

from riemann_reporter.clock import Clock  # noqa: E402
from riemann_reporter.errors import NotConnectedError, TransportError  # noqa: E402
from riemann_reporter.event import Event  # noqa: E402
from riemann_reporter.reporter import RiemannReporter  # noqa: E402
from riemann_reporter.riemann import Riemann  # noqa: E402
from riemann_reporter.transport import Transport  # noqa: E402

TEST_HOSTNAME = "test-host"
# 毫秒时间戳，对应 1700000123 秒
TEST_TIME_MS = 1_700_000_123_456
TEST_TIMESTAMP = 1_700_000_123


def _has_riemann_client() -> bool:
    """检测 riemann-client 是否可用（含 protobuf 生成代码）"""
    try:
        import riemann_client.riemann_pb2  # noqa: F401
        import riemann_client.transport  # noqa: F401
        return True
    except (ImportError, TypeError):
        return False


HAS_RIEMANN_CLIENT = _has_riemann_client()

skip_no_riemann_client = pytest.mark.skipif(
    not HAS_RIEMANN_CLIENT, reason="riemann-client 未安装"
)


class FakeTransport(Transport):
    """记录调用的内存传输层"""

    def __init__(self, fail_connect: int = 0, fail_send: int = 0):
        # 接下来 N 次 connect/send 失败
        self.fail_connect = fail_connect
        self.fail_send = fail_send
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.batches: List[List[Event]] = []

    def connect(self) -> None:
        self.connect_calls += 1
        if self.fail_connect > 0:
            self.fail_connect -= 1
            raise TransportError("connection refused")
        self.connected = True

    def is_connected(self) -> bool:
        return self.connected

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False

    def send_events(self, events: Sequence[Event]) -> None:
        if not self.connected:
            raise NotConnectedError()
        if self.fail_send > 0:
            self.fail_send -= 1
            self.connected = False
            raise TransportError("broken pipe")
        self.batches.append(list(events))

    @property
    def events(self) -> List[Event]:
        return [event for batch in self.batches for event in batch]


class FixedClock(Clock):
    """固定时间的时钟"""

    def __init__(self, time_ms: int = TEST_TIME_MS):
        self.time_ms = time_ms
        self.calls = 0

    def get_time(self) -> int:
        self.calls += 1
        return self.time_ms


@pytest.fixture(scope="function")
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture(scope="function")
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture(scope="function")
def riemann(transport: FakeTransport) -> Riemann:
    """使用内存传输层的 Riemann 适配器"""
    return Riemann("riemann.test", 5555, transport=transport, local_hostname=TEST_HOSTNAME)


@pytest.fixture(scope="function")
def reporter(riemann: Riemann, clock: FixedClock) -> RiemannReporter:
    """默认配置的上报器"""
    return RiemannReporter(riemann, clock=clock)
