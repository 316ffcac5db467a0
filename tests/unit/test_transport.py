"""
riemann-client 传输层测试

运行测试命令:
    pytest tests/unit/test_transport.py -v
"""

from unittest.mock import patch

import pytest

from conftest import skip_no_riemann_client
from riemann_reporter.errors import NotConnectedError, TransportError
from riemann_reporter.event import Event
from riemann_reporter.transport import RiemannClientTransport

EVENTS = [
    Event(service="hits count", host="web-01", metric=42, ttl=10.0, time=1700000000),
    Event(service="temp", host="web-01", metric=3.5, ttl=10.0, time=1700000000),
]


class TestWithoutConnection:
    """无需 riemann-client 的测试"""

    def test_initial_state(self):
        transport = RiemannClientTransport("riemann.test", 5555, timeout=1.0)
        assert not transport.is_connected()

    def test_send_not_connected(self):
        transport = RiemannClientTransport()
        with pytest.raises(NotConnectedError):
            transport.send_events(EVENTS)

    def test_disconnect_not_connected(self):
        """未连接时断开不报错"""
        RiemannClientTransport().disconnect()


@skip_no_riemann_client
class TestRiemannClientTransport:
    """基于 mock TCPTransport 的测试"""

    @pytest.fixture
    def tcp(self):
        with patch("riemann_client.transport.TCPTransport") as tcp_class:
            yield tcp_class

    def test_connect(self, tcp):
        transport = RiemannClientTransport("riemann.test", 5555, timeout=2.0)

        transport.connect()

        tcp.assert_called_once_with("riemann.test", 5555, 2.0)
        tcp.return_value.connect.assert_called_once_with()
        assert transport.is_connected()

    def test_connect_failure(self, tcp):
        tcp.return_value.connect.side_effect = ConnectionRefusedError("refused")
        transport = RiemannClientTransport()

        with pytest.raises(TransportError):
            transport.connect()
        assert not transport.is_connected()

    def test_send_events(self, tcp):
        """一次发送一条 Msg，整数写入 metric_sint64，浮点写入 metric_d"""
        transport = RiemannClientTransport()
        transport.connect()

        transport.send_events(EVENTS)

        tcp.return_value.send.assert_called_once()
        message = tcp.return_value.send.call_args[0][0]
        assert len(message.events) == 2

        first, second = message.events
        assert first.service == "hits count"
        assert first.host == "web-01"
        assert first.time == 1700000000
        assert first.ttl == pytest.approx(10.0)
        assert first.metric_sint64 == 42
        assert first.metric_f == pytest.approx(42.0)
        assert second.service == "temp"
        assert second.metric_d == 3.5

    def test_send_failure_disconnects(self, tcp):
        """发送失败后断开，下次需要重新连接"""
        from riemann_client.transport import RiemannError

        tcp.return_value.send.side_effect = RiemannError("server error")
        transport = RiemannClientTransport()
        transport.connect()

        with pytest.raises(TransportError):
            transport.send_events(EVENTS)

        assert not transport.is_connected()
        tcp.return_value.disconnect.assert_called_once_with()

    def test_send_encoding_error(self, tcp):
        """无法编码的事件包装为 TransportError，且不发送"""
        transport = RiemannClientTransport()
        transport.connect()
        oversized = Event(service="big count", host="web-01", metric=2 ** 64, ttl=10.0, time=1)

        with pytest.raises(TransportError):
            transport.send_events([oversized])

        tcp.return_value.send.assert_not_called()

    def test_send_socket_error(self, tcp):
        tcp.return_value.send.side_effect = BrokenPipeError("broken pipe")
        transport = RiemannClientTransport()
        transport.connect()

        with pytest.raises(TransportError):
            transport.send_events(EVENTS)
        assert not transport.is_connected()

    def test_disconnect(self, tcp):
        transport = RiemannClientTransport()
        transport.connect()

        transport.disconnect()
        transport.disconnect()

        tcp.return_value.disconnect.assert_called_once_with()
        assert not transport.is_connected()

    def test_disconnect_error_ignored(self, tcp):
        tcp.return_value.disconnect.side_effect = OSError("already closed")
        transport = RiemannClientTransport()
        transport.connect()

        transport.disconnect()

        assert not transport.is_connected()

