"""Configuration types, reconciliation rules and a minikube admin for local Kubernetes clusters."""

__version__ = "0.1.0"