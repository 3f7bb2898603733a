"""Collect a short description of the host running the console."""

from __future__ import annotations

import platform
import socket

from utils import common
from utils.console_models import DeviceInfo

logger = common.get_logger('device_info')

_UNKNOWN = 'Unknown'


def _system_version() -> str:
    system = platform.system()
    if system == 'Darwin':
        mac_version = platform.mac_ver()[0]
        if mac_version:
            return mac_version
    release = platform.release()
    if system and release:
        return f'{system} {release}'
    return release or system or _UNKNOWN


def _device_name() -> str:
    name = platform.node()
    if name:
        return name
    try:
        return socket.gethostname() or _UNKNOWN
    except OSError as exc:
        logger.debug('Host name lookup failed: %s', exc)
        return _UNKNOWN


def collect_device_info() -> DeviceInfo:
    """Return the current host's version, name and hardware model."""
    info = DeviceInfo(
        system_version=_system_version(),
        name=_device_name(),
        model=platform.machine() or _UNKNOWN,
    )
    logger.debug('Collected device info: %s', info)
    return info


__all__ = ['collect_device_info']
