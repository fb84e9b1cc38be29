"""
Host control-group mode detection.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CGROUP_MOUNT_POINT = "/sys/fs/cgroup"


class CgroupProbe(ABC):
    """Abstract base class for control-group mode probes."""

    @abstractmethod
    def is_unified_mode(self) -> bool:
        """Check if the host runs cgroup v2 in unified mode."""
        pass

    def get_mode(self) -> str:
        """Get the host control-group mode name."""
        return "unified" if self.is_unified_mode() else "legacy"


class SysfsCgroupProbe(CgroupProbe):
    """Detects unified mode by looking at the cgroup mount point."""

    def __init__(self, mount_point: str = DEFAULT_CGROUP_MOUNT_POINT):
        """
        Initialize the probe.

        Args:
            mount_point: Where the host mounts its cgroup hierarchy
        """
        self.mount_point = mount_point
        self._unified: Optional[bool] = None

    def is_unified_mode(self) -> bool:
        """
        Check if the host runs cgroup v2 in unified mode.

        A cgroup2 root always carries a cgroup.controllers file; the v1
        tmpfs at the same location never does. The answer is cached.
        """
        if self._unified is None:
            controllers = os.path.join(self.mount_point, "cgroup.controllers")
            self._unified = os.path.exists(controllers)
            logger.debug(
                f"cgroup mode at {self.mount_point}: "
                f"{'unified' if self._unified else 'legacy'}"
            )
        return self._unified


class StaticCgroupProbe(CgroupProbe):
    """Probe with a fixed answer."""

    def __init__(self, unified: bool):
        self.unified = unified

    def is_unified_mode(self) -> bool:
        return self.unified


_default_probe: Optional[CgroupProbe] = None


def get_cgroup_probe() -> CgroupProbe:
    """
    Get the process-wide probe for the host.

    Returns:
        CgroupProbe reading the default cgroup mount point
    """
    global _default_probe
    if _default_probe is None:
        _default_probe = SysfsCgroupProbe()
    return _default_probe


def is_cgroup2_unified_mode() -> bool:
    """Check if the host runs cgroup v2 in unified mode."""
    return get_cgroup_probe().is_unified_mode()
