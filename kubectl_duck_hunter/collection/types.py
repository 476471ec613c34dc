"""Value types shared by the resolver, the access annotator and the hunter.

Inputs accept the camelCase Kubernetes wire shape so that objects fetched
with the kubernetes client can be passed through
``ApiClient().sanitize_for_serialization(obj)`` unchanged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

CLUSTER_SCOPED = "Cluster"
NAMESPACE_SCOPED = "Namespaced"


def api_version(group: str, version: str) -> str:
    """Join a group and version into an apiVersion. The core group has none."""
    if group:
        return f"{group}/{version}"
    return version


@dataclass(frozen=True)
class ResourceMeta:
    """A resolved resource kind at one apiVersion."""

    api_version: str
    kind: str
    scope: str = NAMESPACE_SCOPED
    accessible_via_policy: bool = False

    @property
    def key(self) -> Tuple[str, str]:
        return (self.api_version, self.kind)

    @property
    def group(self) -> str:
        if "/" in self.api_version:
            return self.api_version.rsplit("/", 1)[0]
        return ""

    @property
    def version(self) -> str:
        return self.api_version.rsplit("/", 1)[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "scope": self.scope,
            "accessibleViaPolicy": self.accessible_via_policy,
        }


@dataclass(frozen=True)
class ResourceRef:
    """An explicit pointer to a kind or resource implementing a duck type.

    Exactly one of ``api_version`` or ``version`` is expected, and exactly one
    of ``kind`` or ``resource``. Shape is validated before it reaches here.
    """

    group: str = ""
    version: str = ""
    api_version: str = ""
    resource: str = ""
    kind: str = ""
    scope: str = NAMESPACE_SCOPED

    @property
    def group_version(self) -> str:
        if self.api_version:
            return self.api_version
        return api_version(self.group, self.version)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceRef":
        return cls(
            group=data.get("group") or "",
            version=data.get("version") or "",
            api_version=data.get("apiVersion") or "",
            resource=data.get("resource") or "",
            kind=data.get("kind") or "",
            scope=data.get("scope") or NAMESPACE_SCOPED,
        )


@dataclass(frozen=True)
class DefinitionVersion:
    name: str
    served: bool = True


@dataclass
class CustomResourceDefinition:
    """The parts of a CustomResourceDefinition the hunter inspects."""

    group: str
    kind: str
    scope: str = NAMESPACE_SCOPED
    versions: List[DefinitionVersion] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    name: str = ""

    def served_metas(self) -> List[ResourceMeta]:
        """One ResourceMeta per served version, in declaration order."""
        return [
            ResourceMeta(
                api_version=api_version(self.group, v.name),
                kind=self.kind,
                scope=self.scope,
            )
            for v in self.versions
            if v.served
        ]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CustomResourceDefinition":
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        names = spec.get("names") or {}
        return cls(
            group=spec.get("group") or "",
            kind=names.get("kind") or "",
            scope=spec.get("scope") or NAMESPACE_SCOPED,
            versions=[
                DefinitionVersion(name=v.get("name"), served=bool(v.get("served")))
                for v in (spec.get("versions") or [])
            ],
            labels=dict(metadata.get("labels") or {}),
            annotations=dict(metadata.get("annotations") or {}),
            name=metadata.get("name") or "",
        )


@dataclass(frozen=True)
class DuckFilters:
    """Label and annotation rules for routing definitions into versions.

    duck_label is expected in the form ``<group>/<names.singular>``; a
    definition labelled with it must carry ``"true"`` to take part.
    duck_version_prefix is expected in the form ``<names.plural>.<group>``;
    annotations ``<prefix>/<duckVersion>: "v1,v2"`` list the served versions
    that map into that duck version.
    """

    duck_label: str = ""
    duck_version_prefix: str = ""

    @property
    def version_annotation_prefix(self) -> Optional[str]:
        if not self.duck_version_prefix:
            return None
        return self.duck_version_prefix + "/"
