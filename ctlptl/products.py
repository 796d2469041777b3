"""The cluster products ctlptl knows about, and what each of them supports."""

from __future__ import annotations

import re
from enum import Enum

_PORT = re.compile(r"[+-]?[0-9]+")


class Product(str, Enum):
    """A tool that creates and runs Kubernetes clusters."""

    DOCKER_DESKTOP = "docker-desktop"
    KIND = "kind"
    K3D = "k3d"
    MINIKUBE = "minikube"
    MICROK8S = "microk8s"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    def default_cluster_name(self) -> str:
        """The name a cluster gets when its config does not give one."""
        return _DEFAULT_NAMES.get(self, "")


_DEFAULT_NAMES = {
    Product.DOCKER_DESKTOP: "docker-desktop",
    Product.KIND: "kind-kind",
    Product.K3D: "k3d-k3s-default",
    Product.MINIKUBE: "minikube",
    Product.MICROK8S: "microk8s",
}

_REGISTRY_PRODUCTS = frozenset({Product.KIND, Product.MINIKUBE, Product.K3D})
_VERSIONED_PRODUCTS = frozenset({Product.KIND, Product.MINIKUBE})


def supports_registry(product: str) -> bool:
    """Whether ctlptl can connect a local registry to clusters of this product."""
    return product in _REGISTRY_PRODUCTS


def supports_kubernetes_version(product: str, version: str) -> bool:
    """Whether clusters of this product can run a chosen Kubernetes version."""
    return product in _VERSIONED_PRODUCTS


def registry_labels_for(product: str) -> dict[str, str]:
    """Labels a registry needs before clusters of this product will use it.

    k3d only connects to registries labelled as k3d registries.
    """
    if product == Product.K3D:
        return {"app": "k3d", "k3d.role": "registry"}
    return {}


def current_api_server_port(server: str) -> int:
    """The port at the end of an API server address, or 0 if there is none."""
    last = server.split(":")[-1]
    if not _PORT.fullmatch(last):
        return 0
    return int(last)