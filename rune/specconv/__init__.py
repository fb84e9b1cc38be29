"""
Spec conversion for rune.

Provides the default container spec for enclave workloads and its
conversion to a spec that an unprivileged user can run:
- example(): security-hardened default spec
- to_rootless() / rootless_spec(): rootless conversion
- Spec and friends: typed runtime-spec model with OCI JSON serialization
"""

from .cgroups import CgroupProbe, StaticCgroupProbe, SysfsCgroupProbe, get_cgroup_probe
from .default_spec import example
from .errors import InvalidSpecError, MissingLinuxSectionError, SpecError
from .rootless import rootless_spec, to_rootless
from .specs import SPEC_VERSION, LinuxNamespaceType, Spec, validate_spec

__all__ = [
    "CgroupProbe",
    "StaticCgroupProbe",
    "SysfsCgroupProbe",
    "get_cgroup_probe",
    "InvalidSpecError",
    "MissingLinuxSectionError",
    "SpecError",
    "example",
    "rootless_spec",
    "to_rootless",
    "SPEC_VERSION",
    "LinuxNamespaceType",
    "Spec",
    "validate_spec",
]
