# -*- coding: utf-8 -*-
"""
上报器配置模块

提供配置定义，支持 YAML 文件、字典和环境变量加载。

配置文件示例（config.yaml）:
    ```yaml
    riemann_reporter:
      riemann:
        host: riemann.local
        port: 5555
        timeout: 5s
      rate_unit: seconds
      duration_unit: ms
      ttl: 30
      period: 10s
      unsupported_gauge_policy: skip
    ```
"""

import copy
import os
import re
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from riemann_reporter.errors import ConfigError
from riemann_reporter.reporter import UnsupportedGaugePolicy
from riemann_reporter.riemann import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TTL
from riemann_reporter.units import TimeUnit

ROOT_KEY = "riemann_reporter"

_DURATION_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(ms|us|ns|h|m|s)?", re.IGNORECASE)

_DURATION_MULTIPLIERS = {
    "h": 3600,
    "m": 60,
    "s": 1,
    "ms": 0.001,
    "us": 0.000001,
    "ns": 0.000000001,
    None: 1,
}


def parse_duration(value: Union[str, int, float]) -> float:
    """
    解析时间字符串为秒数

    支持格式：
    - 纯数字：直接作为秒数
    - "30s"：30 秒
    - "5m"：5 分钟
    - "1h30m"：1 小时 30 分钟
    - "100ms"：100 毫秒

    Args:
        value: 时间值

    Returns:
        秒数（float）

    Raises:
        ConfigError: 无法解析
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"invalid duration: {value!r}")

    text = value.strip()
    total_seconds = 0.0
    position = 0
    for match in _DURATION_PATTERN.finditer(text):
        if text[position:match.start()].strip():
            raise ConfigError(f"invalid duration: {value!r}")
        unit = match.group(2).lower() if match.group(2) else None
        total_seconds += float(match.group(1)) * _DURATION_MULTIPLIERS[unit]
        position = match.end()

    if position == 0 or text[position:].strip():
        raise ConfigError(f"invalid duration: {value!r}")
    return total_seconds


class RiemannConfig(BaseModel):
    """Riemann 连接配置"""
    model_config = ConfigDict(frozen=True)

    host: str = Field(default=DEFAULT_HOST, description="Riemann 地址")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Riemann 端口")
    timeout: str = Field(default="5s", description="socket 超时时间")

    @field_validator("timeout", mode="before")
    @classmethod
    def _check_timeout(cls, value: Any) -> str:
        parse_duration(value)
        return str(value)

    @property
    def timeout_seconds(self) -> float:
        """获取超时秒数"""
        return parse_duration(self.timeout)


class ReporterConfig(BaseModel):
    """上报器配置"""
    model_config = ConfigDict(frozen=True)

    riemann: RiemannConfig = Field(default_factory=RiemannConfig, description="Riemann 配置")
    rate_unit: TimeUnit = Field(default=TimeUnit.SECONDS, description="速率换算单位")
    duration_unit: TimeUnit = Field(default=TimeUnit.MILLISECONDS, description="耗时换算单位")
    ttl: float = Field(default=DEFAULT_TTL, gt=0, description="事件存活时间（秒）")
    period: str = Field(default="10s", description="上报周期")
    unsupported_gauge_policy: UnsupportedGaugePolicy = Field(
        default=UnsupportedGaugePolicy.SKIP,
        description="不支持的 Gauge 值处理策略（skip/abort）",
    )

    @field_validator("rate_unit", "duration_unit", mode="before")
    @classmethod
    def _parse_unit(cls, value: Any) -> TimeUnit:
        return TimeUnit.parse(value)

    @field_validator("period", mode="before")
    @classmethod
    def _check_period(cls, value: Any) -> str:
        if parse_duration(value) <= 0:
            raise ConfigError(f"period must be positive: {value!r}")
        return str(value)

    @property
    def period_seconds(self) -> float:
        """获取上报周期秒数"""
        return parse_duration(self.period)


def load_config(
    config_file: Optional[str] = None,
    config_dict: Optional[Dict[str, Any]] = None,
    env_prefix: str = "",
) -> ReporterConfig:
    """
    加载上报器配置

    优先级：环境变量 > config_dict > config_file > 默认值

    Args:
        config_file: YAML 配置文件路径
        config_dict: 配置字典
        env_prefix: 环境变量前缀，如 "RIEMANN_REPORTER"

    Returns:
        ReporterConfig 实例
    """
    data: Dict[str, Any] = {}

    # 1. 从文件加载
    if config_file:
        if not os.path.exists(config_file):
            raise ConfigError(f"config file not found: {config_file}")
        import yaml

        with open(config_file, "r", encoding="utf-8") as f:
            file_data = yaml.safe_load(f) or {}
        data = _unwrap(file_data)

    # 2. 合并字典配置
    if config_dict:
        _deep_merge(data, _unwrap(config_dict))

    # 3. 从环境变量覆盖
    if env_prefix:
        _override_from_env(data, env_prefix)

    return ReporterConfig(**data)


def load_config_from_file(config_file: str) -> ReporterConfig:
    """从 YAML 文件加载配置"""
    return load_config(config_file=config_file)


def _unwrap(data: Dict[str, Any]) -> Dict[str, Any]:
    """支持 riemann_reporter 作为根键"""
    return copy.deepcopy(data.get(ROOT_KEY) or data)


def _deep_merge(base: Dict, override: Dict) -> None:
    """深度合并字典"""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _override_from_env(data: Dict, prefix: str) -> None:
    """从环境变量覆盖配置"""
    prefix = prefix.upper()

    env_mappings = {
        f"{prefix}_HOST": ("riemann", "host"),
        f"{prefix}_PORT": ("riemann", "port"),
        f"{prefix}_TIMEOUT": ("riemann", "timeout"),
        f"{prefix}_RATE_UNIT": ("rate_unit",),
        f"{prefix}_DURATION_UNIT": ("duration_unit",),
        f"{prefix}_TTL": ("ttl",),
        f"{prefix}_PERIOD": ("period",),
        f"{prefix}_UNSUPPORTED_GAUGE_POLICY": ("unsupported_gauge_policy",),
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(data, path, _parse_env_value(value))


def _set_nested(data: Dict, path: tuple, value: Any) -> None:
    """设置嵌套字典的值"""
    for key in path[:-1]:
        data = data.setdefault(key, {})
    data[path[-1]] = value


def _parse_env_value(value: str) -> Any:
    """解析环境变量值"""
    try:
        return int(value)
    except ValueError:
        try:
            return float(value)
        except ValueError:
            return value
