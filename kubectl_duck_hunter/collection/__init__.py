"""Duck type collection: resolver, hunter and access annotation."""

from kubectl_duck_hunter.collection.access import (
    BASELINE_VERBS,
    accessible_group_resources,
    is_subset,
    set_accessible_via_policy,
)
from kubectl_duck_hunter.collection.ducks import (
    DuckHunter,
    FilterDecision,
    Routing,
    duck_count,
    route_definition,
)
from kubectl_duck_hunter.collection.resources import ResolverCache, ResourceResolver
from kubectl_duck_hunter.collection.types import (
    CLUSTER_SCOPED,
    NAMESPACE_SCOPED,
    CustomResourceDefinition,
    DefinitionVersion,
    DuckFilters,
    ResourceMeta,
    ResourceRef,
    api_version,
)

__all__ = [
    "BASELINE_VERBS",
    "CLUSTER_SCOPED",
    "NAMESPACE_SCOPED",
    "CustomResourceDefinition",
    "DefinitionVersion",
    "DuckFilters",
    "DuckHunter",
    "FilterDecision",
    "ResolverCache",
    "ResourceMeta",
    "ResourceRef",
    "ResourceResolver",
    "Routing",
    "accessible_group_resources",
    "api_version",
    "duck_count",
    "is_subset",
    "route_definition",
    "set_accessible_via_policy",
]
