"""Collect, sort and bucket resources that implement a duck type.

Resources come in two ways: CustomResourceDefinitions, inspected for the
duck label and version annotations, and explicit references which bypass
discovery. The hunter decides which duck versions each one belongs to and
``classify()`` returns the de-duplicated, sorted result per duck version.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from kubectl_duck_hunter.collection.access import accessible_group_resources, set_accessible_via_policy
from kubectl_duck_hunter.collection.resources import ResourceResolver
from kubectl_duck_hunter.collection.types import (
    CustomResourceDefinition,
    DuckFilters,
    ResourceMeta,
    ResourceRef,
)
from kubectl_duck_hunter.errors import ResourceNotFoundError, ResourceNotKnownError

logger = logging.getLogger("mcp-server")


class FilterDecision(enum.Enum):
    UNFILTERED = "unfiltered"
    REJECTED = "rejected"
    ROUTED = "routed"


@dataclass(frozen=True)
class Routing:
    """Where one definition goes.

    For ROUTED, ``versions`` maps each duck version named by an annotation to
    the served version tokens listed in it.
    """

    decision: FilterDecision
    versions: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    def duck_versions_for(self, served_version: str) -> List[str]:
        return [dv for dv, tokens in self.versions.items() if served_version in tokens]


UNFILTERED = Routing(FilterDecision.UNFILTERED)
REJECTED = Routing(FilterDecision.REJECTED)


def route_definition(filters: Optional[DuckFilters], crd: CustomResourceDefinition) -> Routing:
    """Decide how a definition is bucketed under the given filters."""
    if filters is None:
        return UNFILTERED

    if filters.duck_label and filters.duck_label in crd.labels:
        if crd.labels[filters.duck_label] != "true":
            return REJECTED

    prefix = filters.version_annotation_prefix
    if prefix is None:
        return UNFILTERED

    versions: Dict[str, FrozenSet[str]] = {}
    for key in sorted(crd.annotations):
        if not key.startswith(prefix):
            continue
        duck_version = key[len(prefix):]
        tokens = frozenset(t.strip() for t in crd.annotations[key].split(","))
        versions[duck_version] = tokens
    if not versions:
        return UNFILTERED
    return Routing(FilterDecision.ROUTED, versions)


def duck_count(ducks: Mapping[str, List[Any]]) -> int:
    return sum(len(metas) for metas in ducks.values())


class DuckHunter:
    """Buckets resources into duck type versions.

    Args:
        resolver: snapshot used to turn references into kinds and validate
            them. None treats every reference naming a kind as valid.
        default_versions: duck versions that unfiltered definitions join.
        filters: optional label and annotation rules.
        policy: optional ClusterRole-like document ``{"rules": [...]}`` used to
            mark which resources it can get, watch and list.
    """

    def __init__(
        self,
        resolver: Optional[ResourceResolver] = None,
        default_versions: Iterable[str] = (),
        filters: Optional[DuckFilters] = None,
        policy: Optional[Mapping[str, Any]] = None,
    ):
        self.resolver = resolver
        self.filters = filters
        self.default_versions: List[str] = []
        for name in default_versions:
            if name not in self.default_versions:
                self.default_versions.append(name)
        self._versions: List[str] = list(self.default_versions)
        self._entries: List[Tuple[str, ResourceMeta]] = []
        self._accessible = accessible_group_resources(policy)
        self.dropped_definitions = 0

    @property
    def versions(self) -> List[str]:
        """Every duck version seen so far, defaults first."""
        return list(self._versions)

    def _touch(self, duck_version: str) -> None:
        if duck_version not in self._versions:
            self._versions.append(duck_version)

    def _append(self, duck_version: str, meta: ResourceMeta) -> None:
        self._touch(duck_version)
        self._entries.append((duck_version, meta))

    def add_definitions(self, crds: Iterable[CustomResourceDefinition]) -> None:
        for crd in crds:
            self.add_definition(crd)

    def add_definition(self, crd: Optional[CustomResourceDefinition]) -> None:
        if crd is None:
            return
        metas = crd.served_metas()
        if not metas:
            return

        routing = route_definition(self.filters, crd)
        if routing.decision is FilterDecision.REJECTED:
            self.dropped_definitions += 1
            logger.debug(f"Skipping {crd.kind} ({crd.group}): {self.filters.duck_label} is not true")
            return

        if routing.decision is FilterDecision.UNFILTERED:
            for meta in metas:
                for dv in self.default_versions:
                    self._append(dv, meta)
            return

        for dv in routing.versions:
            self._touch(dv)
        placed = 0
        for meta in metas:
            for dv in routing.duck_versions_for(meta.version):
                self._append(dv, meta)
                placed += 1
        if not placed:
            self.dropped_definitions += 1
            logger.debug(
                f"{crd.kind} ({crd.group}) has duck version annotations "
                f"but none list a served version"
            )

    def add_reference(self, duck_version: str, ref: ResourceRef) -> None:
        """Add an explicit reference to ``duck_version``.

        Raises:
            ResourceNotKnownError: the resolver does not know the kind or
                resource at the reference's group-version.
        """
        group_version = ref.group_version
        kind = ref.kind
        if not kind:
            if self.resolver is None:
                raise ResourceNotKnownError(group_version, ref.resource)
            try:
                kind = self.resolver.kind_for(group_version, ref.resource)
            except ResourceNotFoundError as e:
                logger.debug(f"Unable to resolve reference for {duck_version}: {e}")
                raise ResourceNotKnownError(group_version, ref.resource) from e

        if self.resolver is not None and not self.resolver.kind_exists(group_version, kind):
            raise ResourceNotKnownError(group_version, kind)

        self._append(duck_version, ResourceMeta(api_version=group_version, kind=kind, scope=ref.scope))

    def add_references(self, duck_version: str, refs: Iterable[ResourceRef]) -> None:
        for ref in refs:
            self.add_reference(duck_version, ref)

    def classify(self) -> Dict[str, List[ResourceMeta]]:
        """Return duck version -> sorted, unique, policy-annotated resources.

        Duck versions with nothing in them are left out.
        """
        buckets: Dict[str, Dict[Tuple[str, str], ResourceMeta]] = {}
        for dv, meta in self._entries:
            buckets.setdefault(dv, {}).setdefault(meta.key, meta)

        ducks: Dict[str, List[ResourceMeta]] = {}
        for dv in self._versions:
            unique = buckets.get(dv)
            if not unique:
                continue
            ordered = [unique[k] for k in sorted(unique)]
            ducks[dv] = set_accessible_via_policy(self._accessible, ordered)
        return ducks
