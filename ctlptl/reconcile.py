"""Deciding whether an existing cluster can be changed to match a desired one."""

from __future__ import annotations

import dataclasses
import difflib
from typing import Any

import yaml

from ctlptl.api import Cluster
from ctlptl.products import Product, supports_kubernetes_version, supports_registry
from ctlptl.versions import parse_tolerant

_KIND_PREFIX = "kind-"


def _default_name(product: str) -> str:
    try:
        return Product(product).default_cluster_name()
    except ValueError:
        return ""


def fill_defaults(cluster: Cluster) -> None:
    """Fill in the cluster name, and keep the Kind config's name in step with it."""
    kind_config = cluster.kind_v1alpha4_cluster
    # A name given only in the Kind config is lifted into the main config.
    if kind_config is not None and not cluster.name and kind_config.get("name"):
        cluster.name = f"{_KIND_PREFIX}{kind_config['name']}"

    if not cluster.name:
        cluster.name = _default_name(cluster.product)

    if kind_config is not None:
        kind_config["name"] = cluster.name.removeprefix(_KIND_PREFIX)


def can_reconcile_k8s_version(desired: Cluster, existing: Cluster) -> bool:
    """Whether the existing cluster's Kubernetes version satisfies the desired one.

    On Kind only the major and minor versions have to match.
    """
    if not desired.kubernetes_version:
        return True
    current = existing.status.kubernetes_version
    if desired.kubernetes_version == current:
        return True
    if desired.product == Product.KIND:
        try:
            wanted = parse_tolerant(desired.kubernetes_version)
            running = parse_tolerant(current)
        except ValueError:
            return False
        return (wanted.major, wanted.minor) == (running.major, running.minor)
    return False


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


def _diff(existing: Any, desired: Any) -> str:
    before = yaml.safe_dump(_plain(existing), sort_keys=True).splitlines()
    after = yaml.safe_dump(_plain(desired), sort_keys=True).splitlines()
    return "\n".join(difflib.unified_diff(before, after, "current", "desired", lineterm=""))


def irreconcilable_reason(desired: Cluster, existing: Cluster) -> str | None:
    """Explain why the existing cluster must be deleted, or return None if it can stay."""
    if not existing.name:
        return None

    name = desired.name
    if existing.product and existing.product != desired.product:
        return f"Deleting cluster {name} to change admin from {existing.product} to {desired.product}"
    if desired.registry and desired.registry != existing.registry:
        return f"Deleting cluster {name} to initialize with registry {desired.registry}"
    if not can_reconcile_k8s_version(desired, existing):
        return (
            f"Deleting cluster {name} because desired Kubernetes version "
            f"({desired.kubernetes_version}) does not match current "
            f"({existing.status.kubernetes_version})"
        )
    if desired.kind_v1alpha4_cluster is not None and existing.kind_v1alpha4_cluster != desired.kind_v1alpha4_cluster:
        return (
            f"Deleting cluster {name} because desired Kind config does not match current.\n"
            f"Cluster config diff: {_diff(existing.kind_v1alpha4_cluster, desired.kind_v1alpha4_cluster)}"
        )
    if desired.minikube is not None and existing.minikube != desired.minikube:
        return (
            f"Deleting cluster {name} because desired Minikube config does not match current.\n"
            f"Cluster config diff: {_diff(existing.minikube, desired.minikube)}"
        )
    return None


def validate_desired(desired: Cluster) -> None:
    """Raise ValueError if the desired cluster asks for something its product cannot do."""
    product = desired.product
    if not product:
        raise ValueError("product field must be non-empty")
    if desired.registry and not supports_registry(product):
        raise ValueError(f"product {product} does not support a registry")
    if desired.kubernetes_version and not supports_kubernetes_version(product, desired.kubernetes_version):
        raise ValueError(f"product {product} does not support a custom Kubernetes version")
    if desired.kind_v1alpha4_cluster is not None and product != Product.KIND:
        raise ValueError(
            f"kind config may only be set on clusters with product: kind. Actual product: {product}"
        )
    if desired.minikube is not None and product != Product.MINIKUBE:
        raise ValueError(
            f"minikube config may only be set on clusters with product: minikube. Actual product: {product}"
        )