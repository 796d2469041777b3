# ctlptl

Building blocks for declaring local Kubernetes clusters and the image
registries they use: configuration types, the rules that decide whether an
existing cluster can be kept or must be re-created, and an admin that drives
the `minikube` command-line tool.

## Installing

```
pip install .
```

## Command line

Print the installed version:

```
ctlptl version
```

Run `ctlptl` with no command to see the help text.

## Library

### Configuration types

Clusters and registries are described by data classes in `ctlptl.api`
(`Cluster`, `ClusterStatus`, `MinikubeCluster`, `Registry`,
`RegistryStatus`, `LocalRegistryHosting`, and the list types `ClusterList`
and `RegistryList`). `Cluster` and `Registry` round-trip through the same
dictionaries used in YAML configuration files, leaving out empty fields:

```python
from ctlptl.api import Cluster

cluster = Cluster.from_dict({
    "apiVersion": "ctlptl.dev/v1alpha1",
    "kind": "Cluster",
    "product": "kind",
    "registry": "ctlptl-registry",
})
print(cluster.to_dict())
```

`GroupVersionKind` and `GroupKind` split and join `apiVersion`/`kind` pairs.

### Products

`ctlptl.products.Product` lists the known cluster products (`docker-desktop`,
`kind`, `k3d`, `minikube`, `microk8s`) and each one's default cluster name.
`supports_registry`, `supports_kubernetes_version` and `registry_labels_for`
say what a product can do, and `current_api_server_port` takes the port from
an API server address.

### Reconciling

```python
from ctlptl.reconcile import fill_defaults, validate_desired

validate_desired(cluster)   # raises ValueError for unsupported options
fill_defaults(cluster)
print(cluster.name)         # kind-kind
```

Given an existing cluster, `irreconcilable_reason` returns a message
explaining why it would have to be deleted and re-created to match the
desired one (different product, registry, Kubernetes version, Kind config or
Minikube config), or `None` if it can stay. `can_reconcile_k8s_version`
checks the Kubernetes versions alone; on kind only major and minor must
agree.

### Versions

`ctlptl.versions.parse_tolerant` parses versions the way tools print them
(`v1.19`, `1.25.2`, `v1.19.3-34+abc`) into an ordered `Version`.

### Minikube

`ctlptl.minikube.MinikubeAdmin` creates and deletes minikube clusters with
the `minikube` CLI, connects a registry container to the cluster network,
patches containerd on each node so images can be pulled from
`localhost:<port>`, and reports the `LocalRegistryHosting` for the cluster.
It takes an `IOStreams`, a Docker client and a command runner.

### Running commands and containers

`ctlptl.runner` has `RealCmdRunner`, which runs subprocesses and raises
`subprocess.CalledProcessError` on failure, and `FakeCmdRunner`, which
records the last command and answers it from a handler function.

`ctlptl.containers.run_container` keeps a detached support container running
through a Docker client (pulling its image if needed), and
`remove_if_necessary` force-removes one. The `DockerClient` protocol names
the client methods they use; clients raise `ContainerNotFoundError` for
missing containers or images.

### Printing resources

`NamePrinter` writes objects in the `kind.group/name` form:

```python
import sys
from ctlptl.printers import NamePrinter

NamePrinter(operation="created").print_obj(cluster, sys.stdout)
# cluster.ctlptl.dev/kind-kind created
```

## What this package does not do

- The command line only prints the version; there are no commands to
  create, list, get or delete clusters or registries.
- Only minikube has a cluster admin. Nothing here creates or deletes kind,
  k3d or Docker Desktop clusters.
- Nothing reads or writes kubeconfig files, talks to a Kubernetes API server,
  or sets up port forwarding to a remote Docker host.
- No Docker client is included; callers supply one that follows the
  `DockerClient` protocol.

## Running the tests

```
pip install .[test]
pytest
```