"""Configuration types for clusters and registries.

The types mirror the Kubernetes API conventions (``kind``/``apiVersion`` type
metadata, a spec and a read-only status) without depending on the Kubernetes
machinery. Serialisation follows the YAML field names and omits empty values.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class GroupKind:
    """An API group and a kind, without a version."""

    group: str = ""
    kind: str = ""


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str = ""
    version: str = ""
    kind: str = ""

    @classmethod
    def from_api_version_and_kind(cls, api_version: str, kind: str) -> GroupVersionKind:
        """Build from an ``apiVersion`` string such as ``group/version`` and a kind.

        An ``apiVersion`` that cannot be parsed keeps only the kind.
        """
        if not api_version:
            return cls(kind=kind)
        if api_version == "/":
            return cls(kind=kind)
        parts = api_version.split("/")
        if len(parts) == 1:
            return cls(version=parts[0], kind=kind)
        if len(parts) == 2:
            return cls(group=parts[0], version=parts[1], kind=kind)
        return cls(kind=kind)

    def to_api_version_and_kind(self) -> tuple[str, str]:
        """Return the ``(apiVersion, kind)`` pair."""
        api_version = f"{self.group}/{self.version}" if self.group else self.version
        return api_version, self.kind

    def group_kind(self) -> GroupKind:
        return GroupKind(group=self.group, kind=self.kind)


@dataclass
class TypeMeta:
    """The ``kind`` and ``apiVersion`` of an object."""

    kind: str = ""
    api_version: str = ""

    def group_version_kind(self) -> GroupVersionKind:
        return GroupVersionKind.from_api_version_and_kind(self.api_version, self.kind)

    def set_group_version_kind(self, gvk: GroupVersionKind) -> None:
        self.api_version, self.kind = gvk.to_api_version_and_kind()


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    if value:
        data[key] = value


def _format_time(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _parse_time(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")
    return data


@dataclass
class LocalRegistryHosting:
    """How a cluster reaches its local registry (``localRegistryHosting.v1``)."""

    host: str = ""
    host_from_cluster_network: str = ""
    host_from_container_runtime: str = ""
    help: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "host", self.host)
        _put(data, "hostFromClusterNetwork", self.host_from_cluster_network)
        _put(data, "hostFromContainerRuntime", self.host_from_container_runtime)
        _put(data, "help", self.help)
        return data


def _hosting_from_dict(data: Any) -> LocalRegistryHosting | None:
    if data is None:
        return None
    data = _mapping(data)
    return LocalRegistryHosting(
        host=data.get("host", "") or "",
        host_from_cluster_network=data.get("hostFromClusterNetwork", "") or "",
        host_from_container_runtime=data.get("hostFromContainerRuntime", "") or "",
        help=data.get("help", "") or "",
    )


@dataclass
class MinikubeCluster:
    """Minikube-specific options, matching the flags of ``minikube start``."""

    container_runtime: str = ""
    extra_configs: list[str] = field(default_factory=list)
    start_flags: list[str] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "containerRuntime", self.container_runtime)
        _put(data, "extraConfigs", list(self.extra_configs))
        _put(data, "startFlags", list(self.start_flags))
        return data

    @classmethod
    def _from_dict(cls, data: Any) -> MinikubeCluster:
        data = _mapping(data)
        return cls(
            container_runtime=data.get("containerRuntime", "") or "",
            extra_configs=list(data.get("extraConfigs") or []),
            start_flags=list(data.get("startFlags") or []),
        )


@dataclass
class ClusterStatus:
    """Most recently observed state of a cluster."""

    creation_timestamp: datetime | None = None
    local_registry_hosting: LocalRegistryHosting | None = None
    cpus: int = 0
    current: bool = False
    kubernetes_version: str = ""

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "creationTimestamp", _format_time(self.creation_timestamp))
        if self.local_registry_hosting is not None:
            data["localRegistryHosting"] = self.local_registry_hosting.to_dict()
        _put(data, "cpus", self.cpus)
        _put(data, "current", self.current)
        _put(data, "kubernetesVersion", self.kubernetes_version)
        return data

    @classmethod
    def _from_dict(cls, data: Any) -> ClusterStatus:
        data = _mapping(data)
        return cls(
            creation_timestamp=_parse_time(data.get("creationTimestamp")),
            local_registry_hosting=_hosting_from_dict(data.get("localRegistryHosting")),
            cpus=int(data.get("cpus") or 0),
            current=bool(data.get("current") or False),
            kubernetes_version=data.get("kubernetesVersion", "") or "",
        )


@dataclass
class Cluster(TypeMeta):
    """Desired configuration and observed status of a cluster."""

    name: str = ""
    product: str = ""
    min_cpus: int = 0
    registry: str = ""
    kubernetes_version: str = ""
    kind_v1alpha4_cluster: dict[str, Any] | None = None
    minikube: MinikubeCluster | None = None
    status: ClusterStatus = field(default_factory=ClusterStatus)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "kind", self.kind)
        _put(data, "apiVersion", self.api_version)
        _put(data, "name", self.name)
        _put(data, "product", self.product)
        _put(data, "minCPUs", self.min_cpus)
        _put(data, "registry", self.registry)
        _put(data, "kubernetesVersion", self.kubernetes_version)
        if self.kind_v1alpha4_cluster is not None:
            data["kindV1Alpha4Cluster"] = copy.deepcopy(self.kind_v1alpha4_cluster)
        if self.minikube is not None:
            data["minikube"] = self.minikube._to_dict()
        _put(data, "status", self.status._to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Cluster:
        data = _mapping(data)
        kind_config = data.get("kindV1Alpha4Cluster")
        minikube = data.get("minikube")
        return cls(
            kind=data.get("kind", "") or "",
            api_version=data.get("apiVersion", "") or "",
            name=data.get("name", "") or "",
            product=data.get("product", "") or "",
            min_cpus=int(data.get("minCPUs") or 0),
            registry=data.get("registry", "") or "",
            kubernetes_version=data.get("kubernetesVersion", "") or "",
            kind_v1alpha4_cluster=(
                copy.deepcopy(dict(_mapping(kind_config))) if kind_config is not None else None
            ),
            minikube=MinikubeCluster._from_dict(minikube) if minikube is not None else None,
            status=ClusterStatus._from_dict(data.get("status")),
        )


@dataclass
class ClusterList(TypeMeta):
    """A list of clusters."""

    items: list[Cluster] = field(default_factory=list)


@dataclass
class RegistryStatus:
    """Most recently observed state of a registry container."""

    creation_timestamp: datetime | None = None
    ip_address: str = ""
    listen_address: str = ""
    host_port: int = 0
    container_port: int = 0
    networks: list[str] = field(default_factory=list)
    container_id: str = ""
    state: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    image: str = ""

    def _is_empty(self) -> bool:
        return self == RegistryStatus()

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "creationTimestamp", _format_time(self.creation_timestamp))
        _put(data, "ipAddress", self.ip_address)
        _put(data, "listenAddress", self.listen_address)
        _put(data, "hostPort", self.host_port)
        _put(data, "containerPort", self.container_port)
        _put(data, "networks", list(self.networks))
        _put(data, "containerId", self.container_id)
        data["state"] = self.state
        _put(data, "labels", dict(self.labels))
        _put(data, "image", self.image)
        return data

    @classmethod
    def _from_dict(cls, data: Any) -> RegistryStatus:
        data = _mapping(data)
        return cls(
            creation_timestamp=_parse_time(data.get("creationTimestamp")),
            ip_address=data.get("ipAddress", "") or "",
            listen_address=data.get("listenAddress", "") or "",
            host_port=int(data.get("hostPort") or 0),
            container_port=int(data.get("containerPort") or 0),
            networks=list(data.get("networks") or []),
            container_id=data.get("containerId", "") or "",
            state=data.get("state", "") or "",
            labels=dict(data.get("labels") or {}),
            image=data.get("image", "") or "",
        )


@dataclass
class Registry(TypeMeta):
    """Desired configuration and observed status of a local registry."""

    name: str = ""
    listen_address: str = ""
    port: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    image: str = ""
    status: RegistryStatus = field(default_factory=RegistryStatus)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        _put(data, "kind", self.kind)
        _put(data, "apiVersion", self.api_version)
        _put(data, "name", self.name)
        _put(data, "listenAddress", self.listen_address)
        _put(data, "port", self.port)
        _put(data, "labels", dict(self.labels))
        _put(data, "image", self.image)
        if not self.status._is_empty():
            data["status"] = self.status._to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Registry:
        data = _mapping(data)
        return cls(
            kind=data.get("kind", "") or "",
            api_version=data.get("apiVersion", "") or "",
            name=data.get("name", "") or "",
            listen_address=data.get("listenAddress", "") or "",
            port=int(data.get("port") or 0),
            labels=dict(data.get("labels") or {}),
            image=data.get("image", "") or "",
            status=RegistryStatus._from_dict(data.get("status")),
        )


@dataclass
class RegistryList(TypeMeta):
    """A list of registries."""

    items: list[Registry] = field(default_factory=list)