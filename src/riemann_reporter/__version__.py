# -*- coding: utf-8 -*-

__title__ = "riemann-reporter"
__description__ = "Periodically report in-process metrics to a Riemann collector"
__version__ = "0.1.0"
__author__ = "The riemann-reporter Authors"
__license__ = "MIT"
