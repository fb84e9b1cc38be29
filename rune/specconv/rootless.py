"""
Conversion of a spec into one that works for rootless containers
(euid != 0).

Each rewrite is a separate step taking a spec and returning a new one;
rootless_spec() runs them in order and to_rootless() writes the result
back into the caller's spec.
"""

import logging
import os
from typing import Optional

from .errors import MissingLinuxSectionError
from .specs import LinuxIDMapping, LinuxNamespace, LinuxNamespaceType, Mount, Spec

logger = logging.getLogger(__name__)

# Namespaces an unprivileged user cannot be given from this path
_DROPPED_NAMESPACES = frozenset({LinuxNamespaceType.NETWORK, LinuxNamespaceType.USER})

# Ownership mount options an unprivileged mounter may not set
_OWNERSHIP_OPTION_PREFIXES = ("uid=", "gid=")


def _require_linux(spec: Spec) -> None:
    if spec.linux is None:
        raise MissingLinuxSectionError()


def rewrite_namespaces(spec: Spec) -> Spec:
    """
    Drop the network and user namespaces and append a single user namespace.

    Args:
        spec: Spec to convert

    Returns:
        A new spec with the rewritten namespace list
    """
    _require_linux(spec)
    result = spec.model_copy(deep=True)

    namespaces = [
        ns for ns in result.linux.namespaces if ns.type not in _DROPPED_NAMESPACES
    ]
    namespaces.append(LinuxNamespace(type=LinuxNamespaceType.USER))
    result.linux.namespaces = namespaces
    return result


def inject_id_mappings(spec: Spec, uid: int, gid: int) -> Spec:
    """
    Map container root to the given host uid and gid, and nothing else.

    Args:
        spec: Spec to convert
        uid: Host effective uid of the caller
        gid: Host effective gid of the caller

    Returns:
        A new spec with single-entry uid and gid mappings
    """
    _require_linux(spec)
    result = spec.model_copy(deep=True)

    result.linux.uid_mappings = [LinuxIDMapping(host_id=uid, container_id=0, size=1)]
    result.linux.gid_mappings = [LinuxIDMapping(host_id=gid, container_id=0, size=1)]
    return result


def _scrub_options(options: Optional[list[str]]) -> Optional[list[str]]:
    kept = [
        option
        for option in options or []
        if not option.startswith(_OWNERSHIP_OPTION_PREFIXES)
    ]
    return kept or None


def rewrite_mounts(spec: Spec) -> Spec:
    """
    Remove mounts under /sys, strip uid=/gid= options from the rest, and
    append a read-only recursive bind of the host /sys.

    Args:
        spec: Spec to convert

    Returns:
        A new spec with the rewritten mount list
    """
    result = spec.model_copy(deep=True)

    mounts = []
    for mount in result.mounts:
        if mount.destination.startswith("/sys"):
            logger.debug(f"Dropping mount {mount.destination} for rootless spec")
            continue
        mount.options = _scrub_options(mount.options)
        mounts.append(mount)

    mounts.append(
        Mount(
            source="/sys",
            destination="/sys",
            type="none",
            options=["rbind", "nosuid", "noexec", "nodev", "ro"],
        )
    )
    result.mounts = mounts
    return result


def strip_resources(spec: Spec) -> Spec:
    """Remove cgroup resource settings."""
    _require_linux(spec)
    result = spec.model_copy(deep=True)
    result.linux.resources = None
    return result


def rootless_spec(spec: Spec, uid: Optional[int] = None, gid: Optional[int] = None) -> Spec:
    """
    Build the rootless form of a spec without touching the original.

    Args:
        spec: Spec to convert; must have a linux section
        uid: Host uid to map to container root (default: effective uid)
        gid: Host gid to map to container root (default: effective gid)

    Returns:
        The converted spec

    Raises:
        MissingLinuxSectionError: If spec.linux is None
    """
    _require_linux(spec)
    if uid is None:
        uid = os.geteuid()
    if gid is None:
        gid = os.getegid()

    result = rewrite_namespaces(spec)
    result = inject_id_mappings(result, uid, gid)
    result = rewrite_mounts(result)
    result = strip_resources(result)

    logger.debug(f"Converted spec to rootless for uid={uid} gid={gid}")
    return result


def to_rootless(spec: Spec, uid: Optional[int] = None, gid: Optional[int] = None) -> None:
    """
    Convert the given spec in place into one that should work with rootless
    containers, removing incompatible options and adding the ones needed.

    Args:
        spec: Spec to convert; must have a linux section
        uid: Host uid to map to container root (default: effective uid)
        gid: Host gid to map to container root (default: effective gid)

    Raises:
        MissingLinuxSectionError: If spec.linux is None
    """
    converted = rootless_spec(spec, uid=uid, gid=gid)
    spec.linux = converted.linux
    spec.mounts = converted.mounts
