# -*- coding: utf-8 -*-
"""
Riemann 传输层

提供：
- Transport：传输层接口（connect/is_connected/disconnect/send_events）
- RiemannClientTransport：基于 riemann-client 的 TCP 实现（protobuf 协议）
"""

import logging
import struct
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from riemann_reporter.errors import NotConnectedError, TransportError
from riemann_reporter.event import Event

logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    传输层基类

    所有传输层实现都需要继承此类。
    """

    @abstractmethod
    def connect(self) -> None:
        """
        建立连接

        Raises:
            TransportError: 连接失败
        """
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """断开连接，重复调用不报错"""
        pass

    @abstractmethod
    def send_events(self, events: Sequence[Event]) -> None:
        """
        一次发送一批事件

        Raises:
            NotConnectedError: 未连接
            TransportError: 发送失败
        """
        pass


class RiemannClientTransport(Transport):
    """
    riemann-client TCP 传输

    riemann-client 在首次 connect() 时才导入。

    示例:
        ```python
        transport = RiemannClientTransport("riemann.local", 5555, timeout=5.0)
        transport.connect()
        transport.send_events(events)
        transport.disconnect()
        ```
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5555,
        timeout: Optional[float] = None,
    ):
        """
        初始化传输层

        Args:
            host: Riemann 地址
            port: Riemann 端口
            timeout: socket 超时（秒），None 表示阻塞
        """
        self._host = host
        self._port = port
        self._timeout = timeout
        self._transport: Optional[Any] = None

    def connect(self) -> None:
        from riemann_client.transport import TCPTransport

        transport = TCPTransport(self._host, self._port, self._timeout)
        try:
            transport.connect()
        except OSError as e:
            raise TransportError(
                f"unable to connect to Riemann at {self._host}:{self._port}: {e}"
            ) from e
        self._transport = transport

    def is_connected(self) -> bool:
        return self._transport is not None

    def disconnect(self) -> None:
        if self._transport is None:
            return

        transport, self._transport = self._transport, None
        try:
            transport.disconnect()
        except OSError as e:
            logger.debug("Riemann disconnect failed: %s", e)

    def send_events(self, events: Sequence[Event]) -> None:
        if self._transport is None:
            raise NotConnectedError()

        from riemann_client.riemann_pb2 import Msg
        from riemann_client.transport import RiemannError

        message = Msg()
        try:
            for event in events:
                _fill_proto_event(message.events.add(), event)
        except (TypeError, ValueError) as e:
            raise TransportError(f"unable to encode {len(events)} events: {e}") from e

        try:
            self._transport.send(message)
        except (OSError, struct.error, RiemannError) as e:
            # 连接状态未知，下个周期重新连接
            self.disconnect()
            raise TransportError(f"unable to send {len(events)} events: {e}") from e


def _fill_proto_event(proto_event: Any, event: Event) -> None:
    """将 Event 写入 riemann_pb2.Event"""
    proto_event.service = event.service
    proto_event.host = event.host
    proto_event.ttl = event.ttl
    proto_event.time = event.time
    if isinstance(event.metric, int):
        proto_event.metric_sint64 = event.metric
    else:
        proto_event.metric_d = event.metric
    proto_event.metric_f = event.metric_value
