"""Hierarchy data model.

Nodes, child edges and leaf records as returned by the remote API.
All of them are immutable once fetched: the server is the source of
truth and the client never mutates what it received.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


class PayloadError(ValueError):
    """Raised when a response body does not have the expected shape."""


@dataclass(frozen=True)
class OntologyNode:
    """One vertex of the remote hierarchy (a GO term).

    Attributes:
        go_id: Globally unique, stable identifier
        name: Human-readable label (may be empty)
        extra: Any other fields the server returned
    """
    go_id: str
    name: str = ""
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        """Label shown in the tree, falling back to the id."""
        return self.name or self.go_id

    @classmethod
    def from_payload(cls, payload: Any) -> 'OntologyNode':
        if not isinstance(payload, Mapping) or not payload.get("go_id"):
            raise PayloadError(f"Expected a term object with go_id, got {payload!r}")
        extra = {k: v for k, v in payload.items() if k not in ("go_id", "name")}
        return cls(go_id=str(payload["go_id"]), name=payload.get("name") or "", extra=extra)

    def to_dict(self) -> Dict[str, Any]:
        return {"go_id": self.go_id, "name": self.name, **self.extra}


@dataclass(frozen=True)
class ChildEdge:
    """A parent -> child reference. A child may have several parents."""
    parent_id: str
    child_id: str

    @classmethod
    def list_from_payload(cls, parent_id: str, payload: Any) -> List['ChildEdge']:
        records = _expect_list(payload)
        edges = []
        for record in records:
            if not isinstance(record, Mapping) or not record.get("child_go_id"):
                raise PayloadError(f"Expected a child record with child_go_id, got {record!r}")
            edges.append(cls(parent_id=parent_id, child_id=str(record["child_go_id"])))
        return edges


@dataclass(frozen=True)
class LeafRecord:
    """A terminal annotation record (an MMRRC strain)."""
    leaf_id: str

    def catalog_url(self, template: str) -> str:
        return template.format(leaf_id=self.leaf_id)

    @classmethod
    def list_from_payload(cls, payload: Any) -> List['LeafRecord']:
        records = _expect_list(payload)
        leaves = []
        for record in records:
            if not isinstance(record, Mapping) or not record.get("mmrrc_id"):
                raise PayloadError(f"Expected a strain record with mmrrc_id, got {record!r}")
            leaves.append(cls(leaf_id=str(record["mmrrc_id"])))
        return leaves


def _expect_list(payload: Any) -> list:
    if not isinstance(payload, list):
        raise PayloadError(f"Expected a JSON list, got {type(payload).__name__}")
    return payload
