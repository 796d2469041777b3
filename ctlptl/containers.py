"""Run and remove background support containers through a Docker client.

Container descriptions use the Docker Engine API's JSON shapes: an inspected
container is a mapping with ``Id`` and ``State`` keys, and the create
configuration is a mapping with keys such as ``Image`` and ``Cmd``.
"""

from __future__ import annotations

import contextlib
from collections.abc import Mapping
from typing import Any, Protocol


class ContainerNotFoundError(LookupError):
    """Raised by a Docker client when a container or image does not exist."""


class DockerClient(Protocol):
    """The parts of a Docker client used to manage containers."""

    def daemon_host(self) -> str: ...

    def image_pull(self, image: str) -> Any: ...

    def container_list(self, **options: Any) -> list[Mapping[str, Any]]: ...

    def container_inspect(self, container_id: str) -> Mapping[str, Any]: ...

    def container_remove(self, container_id: str, *, force: bool = False) -> None: ...

    def container_create(
        self,
        config: Mapping[str, Any],
        host_config: Mapping[str, Any],
        networking_config: Mapping[str, Any],
        name: str,
    ) -> Mapping[str, Any]: ...

    def container_start(self, container_id: str) -> None: ...


def _is_running(container: Mapping[str, Any]) -> bool:
    state = container.get("State") or {}
    return bool(state.get("Running"))


def remove_if_necessary(client: DockerClient, name: str) -> None:
    """Force-remove the named container if it exists."""
    try:
        container = client.container_inspect(name)
    except ContainerNotFoundError:
        return
    if not container:
        return
    client.container_remove(container.get("Id", ""), force=True)


def _drain(stream: Any) -> None:
    try:
        with contextlib.suppress(Exception):
            if hasattr(stream, "read"):
                while stream.read(65536):
                    pass
            elif stream is not None:
                for _ in stream:
                    pass
    finally:
        close = getattr(stream, "close", None)
        if callable(close):
            close()


def _pull(client: DockerClient, image: str) -> None:
    try:
        stream = client.image_pull(image)
    except Exception as exc:
        raise RuntimeError(f"pulling image {image}: {exc}") from exc
    _drain(stream)


def run_container(
    client: DockerClient,
    name: str,
    config: Mapping[str, Any],
    host_config: Mapping[str, Any],
    networking_config: Mapping[str, Any],
) -> None:
    """Make sure a detached container with this name is running.

    A running container is left alone; a stopped one is replaced. The image is
    pulled if the first create attempt cannot find it. Failures raise
    RuntimeError.
    """
    try:
        existing: Mapping[str, Any] | None = client.container_inspect(name)
    except ContainerNotFoundError:
        existing = None
    except Exception as exc:
        raise RuntimeError(f"inspecting {name}: {exc}") from exc

    if existing is not None:
        if existing and _is_running(existing):
            return
        try:
            client.container_remove(name, force=True)
        except Exception as exc:
            raise RuntimeError(f"creating {name}: {exc}") from exc

    try:
        created = client.container_create(config, host_config, networking_config, name)
    except ContainerNotFoundError:
        image = config.get("Image", "")
        try:
            _pull(client, image)
        except RuntimeError as exc:
            raise RuntimeError(f"pulling image {image}: {exc}") from exc
        try:
            created = client.container_create(config, host_config, networking_config, name)
        except Exception as exc:
            raise RuntimeError(f"creating {name}: {exc}") from exc
    except Exception as exc:
        raise RuntimeError(f"creating {name}: {exc}") from exc

    try:
        client.container_start(created.get("Id", ""))
    except Exception as exc:
        raise RuntimeError(f"starting {name}: {exc}") from exc