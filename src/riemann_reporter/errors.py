# -*- coding: utf-8 -*-
"""
异常定义

错误分类：
- ConnectionSetupError：本机主机名解析失败（构造时立即抛出）
- NotConnectedError：未连接时请求事件模板或发送
- TransportError：连接或发送失败（按上报周期丢弃）
- UnsupportedValueError：Gauge 值类型不受支持
- ConfigError：配置非法
"""


class RiemannReporterError(Exception):
    """所有异常的基类"""

    pass


class ConnectionSetupError(RiemannReporterError):
    """连接初始化错误（本机主机名无法解析）"""

    pass


class NotConnectedError(RiemannReporterError):
    """客户端未连接"""

    def __init__(self, message: str = "Client not connected."):
        super().__init__(message)


class TransportError(RiemannReporterError, IOError):
    """传输层 I/O 错误（连接或发送失败）"""

    pass


class UnsupportedValueError(RiemannReporterError, TypeError):
    """Gauge 值类型不受支持"""

    def __init__(self, name: str, value: object):
        self.name = name
        self.value = value
        super().__init__(
            f"Gauge {name!r} was of an unknown type: {type(value).__name__}"
        )


class ConfigError(RiemannReporterError, ValueError):
    """配置错误"""

    pass
