"""
Default spec for enclave containers.
"""

import logging
from typing import Optional

from .cgroups import CgroupProbe, get_cgroup_probe
from .specs import (
    SPEC_VERSION,
    Linux,
    LinuxCapabilities,
    LinuxDeviceCgroup,
    LinuxNamespace,
    LinuxNamespaceType,
    LinuxResources,
    Mount,
    POSIXRlimit,
    Process,
    Root,
    Spec,
    User,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPABILITIES = (
    "CAP_AUDIT_WRITE",
    "CAP_KILL",
    "CAP_NET_BIND_SERVICE",
)

# Host directory holding the SGX architectural enclave service socket
AESMD_SOCKET_DIR = "/var/run/aesmd"

DEFAULT_MASKED_PATHS = (
    "/proc/acpi",
    "/proc/asound",
    "/proc/kcore",
    "/proc/keys",
    "/proc/latency_stats",
    "/proc/timer_list",
    "/proc/timer_stats",
    "/proc/sched_debug",
    "/sys/firmware",
    "/proc/scsi",
)

DEFAULT_READONLY_PATHS = (
    "/proc/bus",
    "/proc/fs",
    "/proc/irq",
    "/proc/sys",
    "/proc/sysrq-trigger",
)

DEFAULT_ANNOTATIONS = {
    "enclave.type": "intelSgx",
    "enclave.runtime.path": "/var/run/rune/liberpal-skeleton-v1.so",
    "enclave.runtime.args": "skeleton,debug",
}


def _default_mounts() -> list[Mount]:
    return [
        Mount(destination="/proc", type="proc", source="proc"),
        Mount(
            destination="/dev",
            type="tmpfs",
            source="tmpfs",
            options=["nosuid", "strictatime", "mode=755", "size=65536k"],
        ),
        Mount(
            destination="/dev/pts",
            type="devpts",
            source="devpts",
            options=[
                "nosuid",
                "noexec",
                "newinstance",
                "ptmxmode=0666",
                "mode=0620",
                "gid=5",
            ],
        ),
        Mount(
            destination="/dev/shm",
            type="tmpfs",
            source="shm",
            options=["nosuid", "noexec", "nodev", "mode=1777", "size=65536k"],
        ),
        Mount(
            destination="/dev/mqueue",
            type="mqueue",
            source="mqueue",
            options=["nosuid", "noexec", "nodev"],
        ),
        Mount(
            destination="/sys",
            type="sysfs",
            source="sysfs",
            options=["nosuid", "noexec", "nodev", "ro"],
        ),
        Mount(
            destination="/sys/fs/cgroup",
            type="cgroup",
            source="cgroup",
            options=["nosuid", "noexec", "nodev", "relatime", "ro"],
        ),
        Mount(
            destination=AESMD_SOCKET_DIR,
            type="bind",
            source=AESMD_SOCKET_DIR,
            options=["rbind", "rprivate"],
        ),
    ]


def example(probe: Optional[CgroupProbe] = None) -> Spec:
    """
    Build the default spec, with enough options set that a user can see
    what a standard enclave container spec looks like.

    Args:
        probe: Host cgroup probe (default: the process-wide probe)

    Returns:
        A freshly built Spec sharing no lists with earlier builds
    """
    if probe is None:
        probe = get_cgroup_probe()

    spec = Spec(
        version=SPEC_VERSION,
        root=Root(path="rootfs"),
        process=Process(
            terminal=True,
            user=User(),
            args=["sh"],
            env=[
                "PATH=/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin",
                "TERM=xterm",
            ],
            cwd="/var/run/rune",
            no_new_privileges=True,
            capabilities=LinuxCapabilities(
                bounding=list(DEFAULT_CAPABILITIES),
                permitted=list(DEFAULT_CAPABILITIES),
                inheritable=list(DEFAULT_CAPABILITIES),
                ambient=list(DEFAULT_CAPABILITIES),
                effective=list(DEFAULT_CAPABILITIES),
            ),
            rlimits=[POSIXRlimit(type="RLIMIT_NOFILE", hard=1024, soft=1024)],
        ),
        hostname="rune",
        mounts=_default_mounts(),
        linux=Linux(
            masked_paths=list(DEFAULT_MASKED_PATHS),
            readonly_paths=list(DEFAULT_READONLY_PATHS),
            resources=LinuxResources(
                devices=[LinuxDeviceCgroup(allow=False, access="rwm")],
            ),
            namespaces=[
                LinuxNamespace(type=LinuxNamespaceType.PID),
                LinuxNamespace(type=LinuxNamespaceType.IPC),
                LinuxNamespace(type=LinuxNamespaceType.UTS),
                LinuxNamespace(type=LinuxNamespaceType.MOUNT),
            ],
        ),
        annotations=dict(DEFAULT_ANNOTATIONS),
    )

    if probe.is_unified_mode():
        spec.linux.namespaces.append(LinuxNamespace(type=LinuxNamespaceType.CGROUP))

    logger.debug(
        "Built default spec with namespaces: "
        + ", ".join(ns.value for ns in spec.linux.namespace_types())
    )
    return spec
