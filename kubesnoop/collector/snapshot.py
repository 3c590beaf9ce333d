"""
Cluster snapshot model.

A snapshot groups collected resources by type. Every resource is a plain
document (mapping) already shaped and redacted by the collector; the
engine only reads it.
"""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from kubesnoop.core.errors import MalformedResourceError

# Entries are not validated here: a malformed resource is skipped by the engine,
# not rejected with the whole snapshot.
Document = Any


class RBACSnapshot(BaseModel):
    """Role objects, evaluated as two separate resource streams."""

    cluster_roles: list[Document] = Field(default_factory=list)
    roles: list[Document] = Field(default_factory=list)


class ClusterSnapshot(BaseModel):
    """Resources collected from one cluster, in collection order."""

    cluster_version: str | None = None
    pods: list[Document] = Field(default_factory=list)
    services: list[Document] = Field(default_factory=list)
    rbac: RBACSnapshot = Field(default_factory=RBACSnapshot)
    namespaces: list[Document] = Field(default_factory=list)
    network_policies: list[Document] = Field(default_factory=list)
    nodes: list[Document] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: str | Path) -> "ClusterSnapshot":
        """Load a snapshot from a YAML or JSON file."""
        path = Path(path)
        content = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
        return cls.model_validate(data or {})


def resource_name(document: Any) -> str:
    return _metadata_field(document, "name")


def resource_namespace(document: Any) -> str:
    return _metadata_field(document, "namespace")


def resource_identifier(kind: str, document: Any, namespaced: bool = True) -> str:
    """
    Build the canonical identifier of a resource.

    Returns:
        "<Kind>/<namespace>/<name>" for namespaced resources, "<Kind>/<name>" otherwise.

    Raises:
        MalformedResourceError: if the document is not a mapping.
    """
    if not isinstance(document, dict):
        raise MalformedResourceError(f"{kind} resource is not a mapping: {type(document).__name__}")
    if namespaced:
        return f"{kind}/{resource_namespace(document)}/{resource_name(document)}"
    return f"{kind}/{resource_name(document)}"


def _metadata_field(document: Any, key: str) -> str:
    if not isinstance(document, dict):
        return ""
    metadata = document.get("metadata")
    if isinstance(metadata, dict) and metadata.get(key):
        return str(metadata[key])
    value = document.get(key)
    return str(value) if value else ""
