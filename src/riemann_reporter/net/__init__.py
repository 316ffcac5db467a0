#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
网络模块

提供网络相关功能：
- ip: 本机主机名解析
"""

from riemann_reporter.net import ip

__all__ = [
    "ip",
]
