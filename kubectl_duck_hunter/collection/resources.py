"""Kind <-> resource name mapping per group-version.

Built from API discovery output. Sub-resources such as ``widgets/status``
are skipped, only top level resources are mapped.
"""

import copy
import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from kubectl_duck_hunter.errors import ResourceNotFoundError

logger = logging.getLogger("mcp-server")

# group-version -> (kind -> resource, resource -> kind)
Mappings = Dict[str, Tuple[Dict[str, str], Dict[str, str]]]


class ResourceResolver:
    """Converts between Resource and Kind, and validates either exists.

    A group-version listed more than once has its resources merged into one
    table, later entries winning for the same kind or resource name.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[str, Iterable[Mapping[str, str]]]]] = None):
        self._mappings: Mappings = {}
        for group_version, resources in entries or []:
            k2r, r2k = self._mappings.setdefault(group_version, ({}, {}))
            for res in resources:
                name = res.get("name") or ""
                kind = res.get("kind") or ""
                if "/" in name:
                    continue
                k2r[kind] = name
                r2k[name] = kind

    @classmethod
    def from_api_resource_lists(cls, api_resource_lists: Iterable[Mapping[str, Any]]) -> "ResourceResolver":
        """Build from ``[{"groupVersion": ..., "resources": [{"name", "kind"}]}]``."""
        return cls(
            (lst.get("groupVersion") or "", lst.get("resources") or [])
            for lst in api_resource_lists
        )

    def kind_exists(self, group_version: str, kind: str) -> bool:
        m = self._mappings.get(group_version)
        return m is not None and kind in m[0]

    def resource_exists(self, group_version: str, resource: str) -> bool:
        m = self._mappings.get(group_version)
        return m is not None and resource in m[1]

    def kind_for(self, group_version: str, resource: str) -> str:
        m = self._mappings.get(group_version)
        if m is None or resource not in m[1]:
            raise ResourceNotFoundError(group_version, resource, looking_for="kind")
        return m[1][resource]

    def resource_for(self, group_version: str, kind: str) -> str:
        m = self._mappings.get(group_version)
        if m is None or kind not in m[0]:
            raise ResourceNotFoundError(group_version, kind, looking_for="resource")
        return m[0][kind]

    def group_versions(self) -> List[str]:
        return sorted(self._mappings)

    def snapshot(self) -> "ResourceResolver":
        """Return an independent deep copy."""
        dup = ResourceResolver()
        dup._mappings = copy.deepcopy(self._mappings)
        return dup

    def __len__(self) -> int:
        return len(self._mappings)


class ResolverCache:
    """Shared resolver that is swapped on resync and snapshotted per pass.

    The lock is only held while copying or replacing the table, never for
    the duration of a classification.
    """

    def __init__(self, resolver: Optional[ResourceResolver] = None):
        self._lock = threading.Lock()
        self._resolver = resolver or ResourceResolver()

    def rebuild(self, api_resource_lists: Iterable[Mapping[str, Any]]) -> None:
        resolver = ResourceResolver.from_api_resource_lists(api_resource_lists)
        with self._lock:
            self._resolver = resolver
        logger.debug(f"Rebuilt resource resolver with {len(resolver)} group versions")

    def snapshot(self) -> ResourceResolver:
        with self._lock:
            return self._resolver.snapshot()
