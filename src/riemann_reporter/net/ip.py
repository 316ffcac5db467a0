#!/usr/bin/env python
# -*- coding: utf-8 -*-

import socket

from riemann_reporter.errors import ConnectionSetupError


def get_local_hostname():
    """
    get local hostname, the name must resolve to an address
    :return: hostname
    """
    try:
        hostname = socket.gethostname()
        socket.gethostbyname(hostname)
    except OSError as e:
        raise ConnectionSetupError(f"unable to resolve local hostname: {e}") from e
    if not hostname:
        raise ConnectionSetupError("unable to resolve local hostname: empty name")
    return hostname
