from datetime import datetime, timezone

import pytest
import yaml

from ctlptl.api import (
    Cluster,
    ClusterList,
    ClusterStatus,
    GroupKind,
    GroupVersionKind,
    LocalRegistryHosting,
    MinikubeCluster,
    Registry,
    RegistryList,
    RegistryStatus,
    TypeMeta,
)


def test_gvk_parses_group_and_version():
    gvk = GroupVersionKind.from_api_version_and_kind("ctlptl.dev/v1alpha1", "Cluster")
    assert gvk == GroupVersionKind(group="ctlptl.dev", version="v1alpha1", kind="Cluster")
    assert gvk.group_kind() == GroupKind(group="ctlptl.dev", kind="Cluster")


def test_gvk_core_version_has_no_group():
    gvk = GroupVersionKind.from_api_version_and_kind("v1", "ConfigMap")
    assert gvk.group == ""
    assert gvk.version == "v1"
    assert gvk.to_api_version_and_kind() == ("v1", "ConfigMap")


def test_gvk_invalid_api_version_keeps_kind_only():
    gvk = GroupVersionKind.from_api_version_and_kind("a/b/c", "Cluster")
    assert gvk == GroupVersionKind(kind="Cluster")


@pytest.mark.parametrize("api_version", ["ctlptl.dev/v1alpha1", "v1", ""])
def test_gvk_round_trip(api_version):
    gvk = GroupVersionKind.from_api_version_and_kind(api_version, "Registry")
    assert gvk.to_api_version_and_kind() == (api_version, "Registry")


def test_type_meta_set_group_version_kind():
    meta = TypeMeta()
    meta.set_group_version_kind(GroupVersionKind("ctlptl.dev", "v1alpha1", "ClusterList"))
    assert meta.api_version == "ctlptl.dev/v1alpha1"
    assert meta.kind == "ClusterList"
    assert meta.group_version_kind().kind == "ClusterList"


def test_cluster_omits_empty_fields():
    assert Cluster(name="kind-kind").to_dict() == {"name": "kind-kind"}


def test_cluster_yaml_keys():
    cluster = Cluster(
        kind="Cluster",
        api_version="ctlptl.dev/v1alpha1",
        product="minikube",
        min_cpus=2,
        kubernetes_version="v1.19.1",
        minikube=MinikubeCluster(container_runtime="docker"),
    )
    data = cluster.to_dict()
    assert data["apiVersion"] == "ctlptl.dev/v1alpha1"
    assert data["minCPUs"] == 2
    assert data["kubernetesVersion"] == "v1.19.1"
    assert data["minikube"] == {"containerRuntime": "docker"}
    assert "status" not in data


def test_cluster_round_trip_through_yaml():
    cluster = Cluster(
        kind="Cluster",
        api_version="ctlptl.dev/v1alpha1",
        name="kind-kind",
        product="kind",
        registry="kind-registry",
        kind_v1alpha4_cluster={"nodes": [{"role": "control-plane"}, {"role": "worker"}]},
        status=ClusterStatus(
            creation_timestamp=datetime(2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            local_registry_hosting=LocalRegistryHosting(host="localhost:5000"),
            cpus=4,
            current=True,
            kubernetes_version="v1.19.1",
        ),
    )
    text = yaml.safe_dump(cluster.to_dict())
    assert Cluster.from_dict(yaml.safe_load(text)) == cluster


def test_cluster_parses_timestamp_string():
    cluster = Cluster.from_dict({"status": {"creationTimestamp": "2021-01-02T03:04:05Z"}})
    assert cluster.status.creation_timestamp == datetime(2021, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert cluster.to_dict()["status"]["creationTimestamp"] == "2021-01-02T03:04:05Z"


def test_cluster_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        Cluster.from_dict(["not", "a", "mapping"])


def test_registry_round_trip():
    registry = Registry(
        kind="Registry",
        api_version="ctlptl.dev/v1alpha1",
        name="kind-registry",
        port=5001,
        labels={"app": "k3d"},
        status=RegistryStatus(
            ip_address="172.0.0.2",
            host_port=5001,
            container_port=5000,
            networks=["bridge", "kind"],
            container_id="fake-container-id",
            state="running",
        ),
    )
    data = registry.to_dict()
    assert data["status"]["containerId"] == "fake-container-id"
    assert data["status"]["state"] == "running"
    assert Registry.from_dict(yaml.safe_load(yaml.safe_dump(data))) == registry


def test_registry_without_status_omits_it():
    assert Registry(name="reg").to_dict() == {"name": "reg"}


def test_local_registry_hosting_keys():
    hosting = LocalRegistryHosting(
        host="localhost:5000",
        host_from_cluster_network="kind-registry:5000",
    )
    assert hosting.to_dict() == {
        "host": "localhost:5000",
        "hostFromClusterNetwork": "kind-registry:5000",
    }


def test_lists_carry_type_meta():
    clusters = ClusterList(kind="ClusterList", api_version="ctlptl.dev/v1alpha1",
                           items=[Cluster(name="a")])
    registries = RegistryList(items=[Registry(name="r")])
    assert clusters.group_version_kind().group == "ctlptl.dev"
    assert [c.name for c in clusters.items] == ["a"]
    assert registries.items[0].name == "r"