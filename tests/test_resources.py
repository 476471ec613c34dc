"""Unit tests for the kind/resource resolver."""

import threading

import pytest

API_RESOURCE_LISTS = [
    {
        "groupVersion": "teach.me.how/v2",
        "resources": [
            {"name": "duckies", "kind": "Ducky"},
            {"name": "duckies/status", "kind": "Ducky"},
            {"name": "geese", "kind": "Goose"},
        ],
    },
    {
        "groupVersion": "v1",
        "resources": [
            {"name": "pods", "kind": "Pod"},
            {"name": "pods/log", "kind": "Pod"},
        ],
    },
]


def _resolver():
    from kubectl_duck_hunter.collection.resources import ResourceResolver

    return ResourceResolver.from_api_resource_lists(API_RESOURCE_LISTS)


class TestResourceResolverLookups:

    @pytest.mark.unit
    def test_kind_exists(self):
        resolver = _resolver()
        assert resolver.kind_exists("teach.me.how/v2", "Ducky")
        assert resolver.kind_exists("v1", "Pod")
        assert not resolver.kind_exists("teach.me.how/v2", "Pod")
        assert not resolver.kind_exists("teach.me.how/v1", "Ducky")

    @pytest.mark.unit
    def test_resource_exists(self):
        resolver = _resolver()
        assert resolver.resource_exists("teach.me.how/v2", "geese")
        assert not resolver.resource_exists("teach.me.how/v2", "ducks")
        assert not resolver.resource_exists("missing/v1", "geese")

    @pytest.mark.unit
    def test_subresources_are_skipped(self):
        resolver = _resolver()
        assert not resolver.resource_exists("teach.me.how/v2", "duckies/status")
        assert not resolver.resource_exists("v1", "pods/log")
        assert resolver.resource_for("v1", "Pod") == "pods"
        assert resolver.resource_for("teach.me.how/v2", "Ducky") == "duckies"

    @pytest.mark.unit
    def test_kind_for(self):
        resolver = _resolver()
        assert resolver.kind_for("teach.me.how/v2", "duckies") == "Ducky"
        assert resolver.kind_for("v1", "pods") == "Pod"

    @pytest.mark.unit
    def test_kind_for_not_found(self):
        from kubectl_duck_hunter.errors import ResourceNotFoundError

        resolver = _resolver()
        with pytest.raises(ResourceNotFoundError) as exc:
            resolver.kind_for("teach.me.how/v2", "swans")
        assert exc.value.group_version == "teach.me.how/v2"
        assert exc.value.name == "swans"
        assert "swans" in str(exc.value)

        with pytest.raises(ResourceNotFoundError):
            resolver.kind_for("unknown/v1", "duckies")

    @pytest.mark.unit
    def test_resource_for_not_found(self):
        from kubectl_duck_hunter.errors import ResourceNotFoundError

        resolver = _resolver()
        with pytest.raises(ResourceNotFoundError) as exc:
            resolver.resource_for("v1", "Swan")
        assert exc.value.group_version == "v1"
        assert exc.value.name == "Swan"

    @pytest.mark.unit
    def test_empty_resolver(self):
        from kubectl_duck_hunter.collection.resources import ResourceResolver

        resolver = ResourceResolver()
        assert len(resolver) == 0
        assert not resolver.kind_exists("v1", "Pod")
        assert not resolver.resource_exists("v1", "pods")

    @pytest.mark.unit
    def test_group_versions(self):
        assert _resolver().group_versions() == ["teach.me.how/v2", "v1"]

    @pytest.mark.unit
    def test_repeated_group_version_merges(self):
        from kubectl_duck_hunter.collection.resources import ResourceResolver

        resolver = ResourceResolver.from_api_resource_lists([
            {"groupVersion": "v1", "resources": [{"name": "pods", "kind": "Pod"}]},
            {"groupVersion": "v1", "resources": [{"name": "services", "kind": "Service"}]},
        ])
        assert resolver.kind_exists("v1", "Pod")
        assert resolver.kind_exists("v1", "Service")
        assert resolver.group_versions() == ["v1"]


class TestResourceResolverSnapshot:

    @pytest.mark.unit
    def test_snapshot_is_independent(self):
        resolver = _resolver()
        snap = resolver.snapshot()

        resolver._mappings["teach.me.how/v2"][0]["Swan"] = "swans"
        del resolver._mappings["v1"]

        assert not snap.kind_exists("teach.me.how/v2", "Swan")
        assert snap.kind_exists("v1", "Pod")
        assert snap.kind_for("teach.me.how/v2", "duckies") == "Ducky"


class TestResolverCache:

    @pytest.mark.unit
    def test_starts_empty(self):
        from kubectl_duck_hunter.collection.resources import ResolverCache

        cache = ResolverCache()
        assert len(cache.snapshot()) == 0

    @pytest.mark.unit
    def test_rebuild_swaps_table(self):
        from kubectl_duck_hunter.collection.resources import ResolverCache

        cache = ResolverCache()
        cache.rebuild(API_RESOURCE_LISTS)
        before = cache.snapshot()
        assert before.kind_exists("teach.me.how/v2", "Ducky")

        cache.rebuild([{"groupVersion": "v1", "resources": [{"name": "pods", "kind": "Pod"}]}])
        after = cache.snapshot()

        assert not after.kind_exists("teach.me.how/v2", "Ducky")
        # Snapshots taken earlier are unaffected by the rebuild.
        assert before.kind_exists("teach.me.how/v2", "Ducky")

    @pytest.mark.unit
    def test_concurrent_rebuild_and_snapshot(self):
        from kubectl_duck_hunter.collection.resources import ResolverCache

        cache = ResolverCache()
        errors = []

        def rebuild():
            for _ in range(50):
                cache.rebuild(API_RESOURCE_LISTS)

        def snapshot():
            for _ in range(50):
                try:
                    snap = cache.snapshot()
                    if len(snap):
                        assert snap.kind_for("teach.me.how/v2", "duckies") == "Ducky"
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=rebuild), threading.Thread(target=snapshot)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
