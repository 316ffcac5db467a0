# -*- coding: utf-8 -*-
"""
Riemann 连接适配器

负责：
- 管理到 Riemann 的单个连接（懒连接）
- 构建预填 service/host/ttl 的事件模板
- 批量发送事件
"""

import logging
from typing import Optional, Sequence

from riemann_reporter.errors import NotConnectedError
from riemann_reporter.event import Event, EventBuilder
from riemann_reporter.net.ip import get_local_hostname
from riemann_reporter.transport import RiemannClientTransport, Transport

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5555
DEFAULT_TTL = 10.0


class Riemann:
    """
    Riemann 连接适配器

    构造时解析本机主机名，不建立连接；首次 connect() 时才连接。
    不是线程安全的，并发使用需由调用方加锁（RiemannReporter 已处理）。

    示例:
        ```python
        with Riemann("riemann.local", 5555) as riemann:
            riemann.connect()
            event = riemann.event("queue size").metric(12).time(now).build()
            riemann.send_events([event])
        ```
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        transport: Optional[Transport] = None,
        timeout: Optional[float] = None,
        local_hostname: Optional[str] = None,
    ):
        """
        初始化连接适配器

        Args:
            host: Riemann 地址
            port: Riemann 端口
            transport: 传输层，默认 RiemannClientTransport
            timeout: socket 超时（秒），仅对默认传输层生效
            local_hostname: 本机主机名，默认自动解析

        Raises:
            ConnectionSetupError: 本机主机名无法解析
        """
        self._host = host
        self._port = port
        self._local_hostname = local_hostname or get_local_hostname()
        self._transport = transport or RiemannClientTransport(host, port, timeout)
        self._default_ttl = DEFAULT_TTL

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def local_hostname(self) -> str:
        return self._local_hostname

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def is_connected(self) -> bool:
        return self._transport.is_connected()

    def connect(self) -> None:
        """
        确保已连接，已连接时不做任何事

        Raises:
            TransportError: 连接失败
        """
        if self._transport.is_connected():
            return

        self._transport.connect()
        logger.info("Riemann connected: host=%s, port=%d", self._host, self._port)

    def set_default_ttl(self, ttl: float) -> None:
        """设置之后创建的事件模板的默认 ttl"""
        self._default_ttl = float(ttl)

    def event(self, service: str, ttl: Optional[float] = None) -> EventBuilder:
        """
        创建事件模板

        Args:
            service: 事件名称
            ttl: 存活时间（秒），默认使用 default_ttl

        Returns:
            预填 service/host/ttl 的 EventBuilder

        Raises:
            NotConnectedError: 未连接
        """
        if not self._transport.is_connected():
            raise NotConnectedError()

        return (
            EventBuilder()
            .service(service)
            .host(self._local_hostname)
            .ttl(self._default_ttl if ttl is None else ttl)
        )

    def send_events(self, events: Sequence[Event]) -> None:
        """
        批量发送事件

        Raises:
            NotConnectedError: 未连接
            TransportError: 发送失败
        """
        self._transport.send_events(events)

    def close(self) -> None:
        """断开连接，可重复调用"""
        if not self._transport.is_connected():
            return

        self._transport.disconnect()
        logger.info("Riemann disconnected: host=%s, port=%d", self._host, self._port)

    def __enter__(self) -> "Riemann":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"Riemann(host={self._host!r}, port={self._port})"
