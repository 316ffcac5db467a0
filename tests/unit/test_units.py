"""
时间单位换算测试
"""

import pytest

from riemann_reporter.errors import ConfigError
from riemann_reporter.units import TimeUnit, convert_duration, convert_rate


class TestTimeUnit:
    """TimeUnit 枚举测试"""

    def test_nanos(self):
        """测试每单位纳秒数"""
        assert TimeUnit.NANOSECONDS.nanos == 1
        assert TimeUnit.MICROSECONDS.nanos == 1_000
        assert TimeUnit.MILLISECONDS.nanos == 1_000_000
        assert TimeUnit.SECONDS.nanos == 1_000_000_000
        assert TimeUnit.MINUTES.nanos == 60_000_000_000
        assert TimeUnit.HOURS.nanos == 3_600_000_000_000
        assert TimeUnit.DAYS.nanos == 86_400_000_000_000

    def test_seconds(self):
        """测试每单位秒数"""
        assert TimeUnit.SECONDS.seconds == 1.0
        assert TimeUnit.MINUTES.seconds == 60.0
        assert TimeUnit.MILLISECONDS.seconds == pytest.approx(0.001)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("seconds", TimeUnit.SECONDS),
            ("SECONDS", TimeUnit.SECONDS),
            ("ms", TimeUnit.MILLISECONDS),
            (" us ", TimeUnit.MICROSECONDS),
            ("ns", TimeUnit.NANOSECONDS),
            ("min", TimeUnit.MINUTES),
            ("m", TimeUnit.MINUTES),
            ("h", TimeUnit.HOURS),
            ("d", TimeUnit.DAYS),
        ],
    )
    def test_parse(self, text, expected):
        """测试解析名称与缩写"""
        assert TimeUnit.parse(text) == expected

    def test_parse_passthrough(self):
        """测试传入枚举原样返回"""
        assert TimeUnit.parse(TimeUnit.HOURS) is TimeUnit.HOURS

    @pytest.mark.parametrize("value", ["fortnights", "", 5, None])
    def test_parse_invalid(self, value):
        """测试无法识别的单位"""
        with pytest.raises(ConfigError):
            TimeUnit.parse(value)


class TestConversion:
    """速率/耗时换算测试"""

    def test_convert_rate_seconds(self):
        """每秒速率保持不变"""
        assert convert_rate(2.0, TimeUnit.SECONDS) == 2.0

    def test_convert_rate_minutes(self):
        """每秒 2 次 = 每分钟 120 次"""
        assert convert_rate(2.0, TimeUnit.MINUTES) == pytest.approx(120.0)

    def test_convert_duration_milliseconds(self):
        """100ns = 0.0001ms"""
        assert convert_duration(100.0, TimeUnit.MILLISECONDS) == pytest.approx(0.0001)

    def test_convert_duration_seconds(self):
        """1.5e9ns = 1.5s"""
        assert convert_duration(1.5e9, TimeUnit.SECONDS) == pytest.approx(1.5)

    def test_convert_duration_nanoseconds(self):
        assert convert_duration(42.0, TimeUnit.NANOSECONDS) == 42.0
