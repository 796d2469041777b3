"""Creating and deleting minikube clusters with the minikube CLI."""

from __future__ import annotations

import io
import json
import logging
import shutil
from collections.abc import Mapping
from typing import Any

from ctlptl.api import Cluster, LocalRegistryHosting, Registry
from ctlptl.runner import CmdRunner, IOStreams
from ctlptl.versions import Version, parse_tolerant

log = logging.getLogger(__name__)

# minikube v1.26 changed the interface for configuring registries, and broke it.
_V1_26 = Version(1, 26, 0)
_V1_27 = Version(1, 27, 0)

_HELP = "Local registry configured by ctlptl"
_RESERVED_NETWORK_MODES = frozenset({"default", "bridge", "host", "none"})


def _is_user_defined(network_mode: str) -> bool:
    return network_mode not in _RESERVED_NETWORK_MODES and not network_mode.startswith("container:")


def _user_defined(network_mode: str) -> str:
    return network_mode if _is_user_defined(network_mode) else ""


def _network_mode(container: Mapping[str, Any]) -> str:
    host_config = (container or {}).get("HostConfig") or {}
    return host_config.get("NetworkMode", "") or ""


def _parse_nodes(output: str) -> list[str]:
    nodes = []
    for line in output.split("\n"):
        fields = line.split()
        if fields and fields[0].strip():
            nodes.append(fields[0].strip())
    return nodes


class MinikubeAdmin:
    """Manages a minikube cluster once the underlying machine is running."""

    def __init__(self, iostreams: IOStreams, docker_client: Any, runner: CmdRunner) -> None:
        self.iostreams = iostreams
        self.docker_client = docker_client
        self.runner = runner

    def ensure_installed(self) -> None:
        if shutil.which("minikube") is None:
            raise RuntimeError("minikube not installed. Please install minikube.")

    def version(self) -> Version:
        """Ask minikube for its version. Raises RuntimeError on failure."""
        out = io.StringIO()
        try:
            self.runner.run_io(
                IOStreams(out=out, err_out=self.iostreams.err_out),
                "minikube", "version", "-o", "json",
            )
        except Exception as exc:
            raise RuntimeError(f"minikube version: {exc}") from exc

        try:
            response, _ = json.JSONDecoder().raw_decode(out.getvalue().lstrip())
        except ValueError as exc:
            raise RuntimeError(f"minikube version: {exc}") from exc
        text = response.get("minikubeVersion", "") if isinstance(response, dict) else ""
        if not text:
            raise RuntimeError("minikube version not found")
        try:
            return parse_tolerant(text)
        except ValueError as exc:
            raise RuntimeError(f"minikube version: {exc}") from exc

    def create(self, desired: Cluster, registry: Registry | None) -> None:
        """Start a minikube cluster, connecting the registry if one is given."""
        log.debug("Creating cluster with config:\n%s\n---", desired)
        if registry is not None:
            log.debug("Initializing cluster with registry config:\n%s\n---", registry)

        version = self.version()
        registry_api_broken = _V1_26 <= version < _V1_27
        registry_api_v2 = version >= _V1_26

        cluster_name = desired.name
        if registry is not None:
            # minikube 0.15+ names the cluster network after the cluster.
            self._ensure_registry_disconnected(registry, cluster_name)

        minikube = desired.minikube
        container_runtime = (minikube.container_runtime if minikube else "") or "containerd"
        extra_configs = list(minikube.extra_configs) if minikube and minikube.extra_configs else [
            "kubelet.max-pods=500"
        ]

        args = ["start"]
        if minikube is not None:
            args.extend(minikube.start_flags)
        args.extend(["-p", cluster_name, "--driver=docker", f"--container-runtime={container_runtime}"])
        args.extend(f"--extra-config={c}" for c in extra_configs)
        if desired.min_cpus:
            args.append(f"--cpus={desired.min_cpus}")
        if desired.kubernetes_version:
            args.extend(["--kubernetes-version", desired.kubernetes_version])

        if registry is not None:
            if registry_api_broken:
                raise RuntimeError(
                    "Error: Local registries are broken in minikube v1.26.\n"
                    "Please upgrade to minikube v1.27."
                )
            args.extend(["--insecure-registry", f"{registry.name}:{registry.status.container_port}"])

        try:
            self.runner.run_io(
                IOStreams(stdin="", out=self.iostreams.out, err_out=self.iostreams.err_out),
                "minikube", *args,
            )
        except Exception as exc:
            raise RuntimeError(f"creating minikube cluster: {exc}") from exc

        if registry is None:
            return

        try:
            container = self.docker_client.container_inspect(cluster_name)
        except Exception as exc:
            raise RuntimeError(f"inspecting minikube cluster: {exc}") from exc
        network_mode = _network_mode(container)
        self._ensure_registry_connected(registry, network_mode)

        if registry_api_v2:
            self._patch_registry_api_v2(desired, registry, network_mode)
        else:
            self._patch_registry_api_v1(desired, registry, network_mode)

    def _in_registry_network(self, registry: Registry, network_mode: str) -> bool:
        return _user_defined(network_mode) in registry.status.networks

    def _ensure_registry_connected(self, registry: Registry, network_mode: str) -> None:
        if _is_user_defined(network_mode) and not self._in_registry_network(registry, network_mode):
            try:
                self.docker_client.network_connect(_user_defined(network_mode), registry.name)
            except Exception as exc:
                raise RuntimeError(f"connecting registry: {exc}") from exc

    def _ensure_registry_disconnected(self, registry: Registry, network_mode: str) -> None:
        # minikube hard-codes IP addresses in the cluster network, so the
        # registry must be off the network before "minikube start".
        if _is_user_defined(network_mode) and self._in_registry_network(registry, network_mode):
            network = _user_defined(network_mode)
            try:
                self.docker_client.network_disconnect(network, registry.name, False)
            except Exception as exc:
                raise RuntimeError(f"disconnecting registry: {exc}") from exc
            registry.status.networks = [n for n in registry.status.networks if n != network]

    def _nodes(self, desired: Cluster) -> list[str]:
        out = io.StringIO()
        try:
            self.runner.run_io(
                IOStreams(out=out, err_out=self.iostreams.err_out),
                "minikube", "-p", desired.name, "node", "list",
            )
        except Exception as exc:
            raise RuntimeError(f"configuring minikube registry: {exc}") from exc
        return _parse_nodes(out.getvalue())

    def _ssh(self, desired: Cluster, node: str, *command: str) -> None:
        try:
            self.runner.run_io(
                self.iostreams, "minikube", "-p", desired.name, "--node", node, "ssh", *command
            )
        except Exception as exc:
            raise RuntimeError(f"configuring minikube registry: {exc}") from exc

    def _network_host(self, registry: Registry, network_mode: str) -> str:
        return registry.name if _is_user_defined(network_mode) else registry.status.ip_address

    def _patch_registry_api_v2(self, desired: Cluster, registry: Registry, network_mode: str) -> None:
        # Clone the registry config that --insecure-registry created, so images
        # can be pulled from localhost:<host port> too.
        for node in self._nodes(desired):
            host = self._network_host(registry, network_mode)
            self._ssh(
                desired, node, "sudo", "cp", r"\-R",
                rf"/etc/containerd/certs.d/{host}\:{registry.status.container_port}",
                rf"/etc/containerd/certs.d/localhost\:{registry.status.host_port}",
            )
            self._ssh(desired, node, "sudo", "systemctl", "restart", "containerd")

    def _patch_registry_api_v1(self, desired: Cluster, registry: Registry, network_mode: str) -> None:
        # This patch does not survive a minikube stop and start.
        config_path = "/etc/containerd/config.toml"
        for node in self._nodes(desired):
            host = self._network_host(registry, network_mode)
            expression = (
                r's,\\\[plugins.\\\(\\\"\\\?.*cri\\\"\\\?\\\).registry.mirrors\\\],[plugins.\\\1.registry.mirrors]\\\n'
                r'\ \ \ \ \ \ \ \ [plugins.\\\1.registry.mirrors.\\\"localhost:%d\\\"]\\\n'
                r'\ \ \ \ \ \ \ \ \ \ endpoint\ =\ [\\\"http://%s:%d\\\"],'
            ) % (registry.status.host_port, host, registry.status.container_port)
            self._ssh(desired, node, "sudo", "sed", r"\-i", expression, config_path)
            self._ssh(desired, node, "sudo", "systemctl", "restart", "containerd")

    def local_registry_hosting(self, desired: Cluster, registry: Registry) -> LocalRegistryHosting:
        try:
            container = self.docker_client.container_inspect(desired.name)
        except Exception as exc:
            raise RuntimeError(f"inspecting minikube cluster: {exc}") from exc
        host = self._network_host(registry, _network_mode(container))
        in_network = f"{host}:{registry.status.container_port}"
        return LocalRegistryHosting(
            host=f"localhost:{registry.status.host_port}",
            host_from_cluster_network=in_network,
            host_from_container_runtime=in_network,
            help=_HELP,
        )

    def delete(self, config: Cluster) -> None:
        try:
            self.runner.run_io(self.iostreams, "minikube", "delete", "-p", config.name)
        except Exception as exc:
            raise RuntimeError(f"deleting minikube cluster: {exc}") from exc