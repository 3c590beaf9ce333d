"""Kubernetes security configuration analysis driven by declarative rules."""

__version__ = "0.1.0"
