"""
Typed model of an OCI runtime specification.

Only the parts of the runtime-spec that the default and rootless specs
populate are modelled. Attribute names are snake_case; the serialized
form uses the runtime-spec JSON names so the document can be written to
a bundle's config.json and read by any compliant runtime.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidSpecError

# Version of the runtime-spec the generated documents conform to.
SPEC_VERSION = "1.0.2"


class _SpecModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LinuxNamespaceType(str, Enum):
    """Namespace types understood by the runtime."""

    PID = "pid"
    NETWORK = "network"
    MOUNT = "mount"
    IPC = "ipc"
    UTS = "uts"
    USER = "user"
    CGROUP = "cgroup"


class Root(_SpecModel):
    path: str
    readonly: Optional[bool] = None


class User(_SpecModel):
    uid: int = 0
    gid: int = 0
    additional_gids: Optional[list[int]] = Field(default=None, alias="additionalGids")


class LinuxCapabilities(_SpecModel):
    """The five capability sets of a process."""

    bounding: list[str] = Field(default_factory=list)
    effective: list[str] = Field(default_factory=list)
    inheritable: list[str] = Field(default_factory=list)
    permitted: list[str] = Field(default_factory=list)
    ambient: list[str] = Field(default_factory=list)


class POSIXRlimit(_SpecModel):
    type: str
    hard: int
    soft: int


class Process(_SpecModel):
    terminal: bool = False
    user: User = Field(default_factory=User)
    args: list[str] = Field(default_factory=list)
    env: list[str] = Field(default_factory=list)
    cwd: str = "/"
    capabilities: Optional[LinuxCapabilities] = None
    rlimits: Optional[list[POSIXRlimit]] = None
    no_new_privileges: bool = Field(default=False, alias="noNewPrivileges")


class Mount(_SpecModel):
    destination: str
    type: Optional[str] = None
    source: Optional[str] = None
    options: Optional[list[str]] = None


class LinuxNamespace(_SpecModel):
    type: LinuxNamespaceType
    path: Optional[str] = None


class LinuxIDMapping(_SpecModel):
    host_id: int = Field(alias="hostID")
    container_id: int = Field(alias="containerID")
    size: int


class LinuxDeviceCgroup(_SpecModel):
    allow: bool
    type: Optional[str] = None
    major: Optional[int] = None
    minor: Optional[int] = None
    access: Optional[str] = None


class LinuxResources(_SpecModel):
    devices: list[LinuxDeviceCgroup] = Field(default_factory=list)


class Linux(_SpecModel):
    uid_mappings: Optional[list[LinuxIDMapping]] = Field(default=None, alias="uidMappings")
    gid_mappings: Optional[list[LinuxIDMapping]] = Field(default=None, alias="gidMappings")
    resources: Optional[LinuxResources] = None
    namespaces: list[LinuxNamespace] = Field(default_factory=list)
    masked_paths: list[str] = Field(default_factory=list, alias="maskedPaths")
    readonly_paths: list[str] = Field(default_factory=list, alias="readonlyPaths")

    def namespace_types(self) -> list[LinuxNamespaceType]:
        """Namespace types in declaration order."""
        return [ns.type for ns in self.namespaces]

    def has_namespace(self, ns_type: LinuxNamespaceType) -> bool:
        return ns_type in self.namespace_types()


class Spec(_SpecModel):
    """Root of a container specification."""

    version: str = Field(default=SPEC_VERSION, alias="ociVersion")
    process: Optional[Process] = None
    root: Optional[Root] = None
    hostname: Optional[str] = None
    mounts: list[Mount] = Field(default_factory=list)
    linux: Optional[Linux] = None
    annotations: Optional[dict[str, str]] = None

    def to_oci_dict(self) -> dict[str, Any]:
        """Serialize to the runtime-spec JSON document shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_oci_dict(cls, data: dict[str, Any]) -> "Spec":
        """Parse a runtime-spec JSON document."""
        return cls.model_validate(data)


def validate_spec(spec: Spec) -> None:
    """
    Check the structural invariants of a spec.

    Args:
        spec: The spec to check

    Raises:
        InvalidSpecError: Listing every violation found
    """
    violations = []
    linux = spec.linux

    if linux is not None:
        seen = set()
        for ns_type in linux.namespace_types():
            if ns_type in seen:
                violations.append(f"duplicate namespace type: {ns_type.value}")
            seen.add(ns_type)

        has_userns = LinuxNamespaceType.USER in seen
        if linux.uid_mappings and not has_userns:
            violations.append("uidMappings require a user namespace")
        if linux.gid_mappings and not has_userns:
            violations.append("gidMappings require a user namespace")

    if violations:
        raise InvalidSpecError(violations)
