[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ctlptl"
version = "0.1.0"
description = "Data types and reconciliation rules for local Kubernetes clusters and their image registries, with a minikube cluster admin"
requires-python = ">=3.10"
keywords = ["kubernetes", "minikube", "kind", "k3d", "docker", "registry", "cluster"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ctlptl = "ctlptl.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ctlptl"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
