"""Marks resources a ClusterRole-style policy can get, watch and list."""

from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Set

from kubectl_duck_hunter.collection.types import ResourceMeta

BASELINE_VERBS = ("get", "watch", "list")

WILDCARD = "*"


def is_subset(first: Iterable[str], second: Iterable[str]) -> bool:
    """True if every item of first is in second. "*" in second matches all."""
    granted = set()
    for value in second:
        if value == WILDCARD:
            return True
        granted.add(value)
    return all(value in granted for value in first)


def accessible_group_resources(
    policy: Optional[Mapping[str, Any]],
    expected_verbs: Iterable[str] = BASELINE_VERBS,
) -> Set[str]:
    """Collect lowercase ``apiGroup:resource`` keys granted the expected verbs.

    Keys may contain "*" for either half; lookups try the wildcard forms.
    """
    keys: Set[str] = set()
    if not policy:
        return keys
    expected = list(expected_verbs)
    for rule in policy.get("rules") or []:
        if not is_subset(expected, rule.get("verbs") or []):
            continue
        for group in rule.get("apiGroups") or []:
            for resource in rule.get("resources") or []:
                keys.add(f"{group}:{resource}".lower())
    return keys


def is_accessible(keys: Set[str], meta: ResourceMeta) -> bool:
    group = meta.group.lower()
    resource = f"{meta.kind}s".lower()
    candidates = (
        f"{group}:{resource}",
        f"{WILDCARD}:{WILDCARD}",
        f"{WILDCARD}:{resource}",
        f"{group}:{WILDCARD}",
    )
    return any(c in keys for c in candidates)


def set_accessible_via_policy(keys: Set[str], metas: Iterable[ResourceMeta]) -> List[ResourceMeta]:
    return [replace(meta, accessible_via_policy=is_accessible(keys, meta)) for meta in metas]
