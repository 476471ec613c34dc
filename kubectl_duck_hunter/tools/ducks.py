"""Duck type discovery tools.

Finds which installed resource kinds implement a duck type, grouped by duck
version, using CRD labels and annotations plus explicit references.

Tools:
    hunt_ducks          - Classify CRDs and references into duck versions
    resolve_resource    - Map a Kind to its Resource (or back) via discovery
    check_duck_access   - Check if a ClusterRole can get/watch/list a kind
"""

import logging
from typing import Any, Dict, List, Optional

from kubernetes.client.rest import ApiException
from mcp.types import ToolAnnotations

from kubectl_duck_hunter.collection import (
    BASELINE_VERBS,
    CustomResourceDefinition,
    DuckFilters,
    DuckHunter,
    ResolverCache,
    ResourceMeta,
    ResourceRef,
    accessible_group_resources,
    duck_count,
)
from kubectl_duck_hunter.collection.access import is_accessible
from kubectl_duck_hunter.errors import ResourceNotFoundError, ResourceNotKnownError
from kubectl_duck_hunter.k8s_config import (
    get_apiextensions_client,
    get_apis_client,
    get_core_client,
    get_custom_objects_client,
    get_rbac_client,
    serialize,
)

logger = logging.getLogger("mcp-server")

_resolver_cache = ResolverCache()


def _discover_api_resources(context: str = "") -> List[Dict[str, Any]]:
    """Fetch every APIResourceList the cluster serves, core group included."""
    lists = [serialize(get_core_client(context).get_api_resources())]
    custom_api = get_custom_objects_client(context)
    for group in get_apis_client(context).get_api_versions().groups or []:
        for version in group.versions or []:
            try:
                resource_list = custom_api.get_api_resources(group.name, version.version)
            except ApiException as e:
                # Aggregated APIs can be registered but unavailable.
                logger.warning(f"Skipping discovery of {version.group_version}: {e.reason}")
                continue
            lists.append(serialize(resource_list))
    return lists


def _list_crds(context: str, label_selectors: Optional[List[str]]) -> List[CustomResourceDefinition]:
    """List CRDs matching any of the selectors, once each, ordered by name.

    No selectors selects no CRDs.
    """
    api = get_apiextensions_client(context)
    found: Dict[str, CustomResourceDefinition] = {}
    for selector in label_selectors or []:
        crd_list = api.list_custom_resource_definition(label_selector=selector)
        for item in serialize(crd_list.items) or []:
            crd = CustomResourceDefinition.from_dict(item)
            found.setdefault(crd.name, crd)
    return [found[name] for name in sorted(found)]


def _read_cluster_role(name: str, context: str) -> Optional[Dict[str, Any]]:
    if not name:
        return None
    return serialize(get_rbac_client(context).read_cluster_role(name))


def register_duck_tools(server, non_destructive: bool):
    """Register duck type discovery tools."""

    @server.tool(
        annotations=ToolAnnotations(
            title="Hunt Duck Type Implementations",
            readOnlyHint=True,
        ),
    )
    def hunt_ducks(
        default_versions: Optional[List[str]] = None,
        label_selectors: Optional[List[str]] = None,
        duck_label: str = "",
        duck_version_prefix: str = "",
        refs: Optional[Dict[str, List[Dict[str, str]]]] = None,
        cluster_role: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Find the resource kinds implementing a duck type, by duck version.

        CRDs selected by the label selectors are bucketed into duck versions:
        CRDs labelled `duck_label: "false"` are skipped, CRDs annotated
        `<duck_version_prefix>/<duckVersion>: "v1,v2"` go to the listed duck
        versions, and every other CRD joins all default versions. Explicit
        refs are added to the duck version they are listed under and must
        exist on the cluster.

        Args:
            default_versions: Duck versions unfiltered CRDs join (e.g. ["v1"])
            label_selectors: CRD label selectors, results are merged. Empty selects no CRDs.
            duck_label: Label key gating CRD membership (e.g. "duck.knative.dev/addressable")
            duck_version_prefix: Annotation prefix for version routing (e.g. "addressables.duck.knative.dev")
            refs: Duck version -> references, each with group/version or apiVersion and kind or resource
            cluster_role: ClusterRole to check get/watch/list access against
            context: Kubernetes context (uses current if not specified)
        """
        try:
            crds = _list_crds(context, label_selectors)
            _resolver_cache.rebuild(_discover_api_resources(context))
            policy = _read_cluster_role(cluster_role, context)

            filters = None
            if duck_label or duck_version_prefix:
                filters = DuckFilters(duck_label=duck_label, duck_version_prefix=duck_version_prefix)

            hunter = DuckHunter(
                resolver=_resolver_cache.snapshot(),
                default_versions=default_versions or [],
                filters=filters,
                policy=policy,
            )
            hunter.add_definitions(crds)
            for duck_version, version_refs in (refs or {}).items():
                hunter.add_references(duck_version, [ResourceRef.from_dict(r) for r in version_refs])

            ducks = hunter.classify()
            return {
                "success": True,
                "context": context or "current",
                "ducks": {
                    dv: [meta.to_dict() for meta in metas]
                    for dv, metas in ducks.items()
                },
                "duckCount": duck_count(ducks),
                "droppedDefinitions": hunter.dropped_definitions,
            }
        except ResourceNotKnownError as e:
            logger.error(f"Error hunting ducks: {e}")
            return {
                "success": False,
                "error": str(e),
                "hint": "Use resolve_resource to check the reference's group version and kind",
            }
        except Exception as e:
            logger.error(f"Error hunting ducks: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="Resolve Kind or Resource",
            readOnlyHint=True,
        ),
    )
    def resolve_resource(
        group_version: str,
        kind: str = "",
        resource: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """Resolve a Kind to its plural Resource name, or a Resource to its Kind.

        Args:
            group_version: API group version (e.g., "apps/v1", "v1")
            kind: Kind to look up (e.g., "Deployment")
            resource: Resource to look up (e.g., "deployments")
            context: Kubernetes context (uses current if not specified)
        """
        if bool(kind) == bool(resource):
            return {"success": False, "error": "Exactly one of kind or resource is required"}
        try:
            _resolver_cache.rebuild(_discover_api_resources(context))
            resolver = _resolver_cache.snapshot()
            if kind:
                resource = resolver.resource_for(group_version, kind)
            else:
                kind = resolver.kind_for(group_version, resource)
            return {
                "success": True,
                "context": context or "current",
                "groupVersion": group_version,
                "kind": kind,
                "resource": resource,
            }
        except ResourceNotFoundError as e:
            return {
                "success": False,
                "error": str(e),
                "hint": "Run kubectl api-resources to list the served kinds and resources",
            }
        except Exception as e:
            logger.error(f"Error resolving resource: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="Check Duck Access via ClusterRole",
            readOnlyHint=True,
        ),
    )
    def check_duck_access(
        api_version: str,
        kind: str,
        cluster_role: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Check whether a ClusterRole can get, watch and list a kind.

        Wildcard api groups, resources and verbs in the role's rules count.

        Args:
            api_version: API version of the kind (e.g., "apps/v1")
            kind: Kind (e.g., "Deployment")
            cluster_role: ClusterRole name
            context: Kubernetes context (uses current if not specified)
        """
        try:
            keys = accessible_group_resources(_read_cluster_role(cluster_role, context))
            meta = ResourceMeta(api_version=api_version, kind=kind)
            return {
                "success": True,
                "context": context or "current",
                "clusterRole": cluster_role,
                "apiVersion": api_version,
                "kind": kind,
                "verbs": list(BASELINE_VERBS),
                "accessible": is_accessible(keys, meta),
            }
        except Exception as e:
            error_msg = str(e)
            if "404" in error_msg or "not found" in error_msg.lower():
                return {
                    "success": False,
                    "error": f"ClusterRole '{cluster_role}' not found",
                }
            logger.error(f"Error checking duck access: {e}")
            return {"success": False, "error": error_msg}
