"""Unit tests for the wire-shape conversions of the collection types."""

import pytest


class TestResourceRef:

    @pytest.mark.unit
    def test_group_version(self):
        from kubectl_duck_hunter.collection.types import ResourceRef

        assert ResourceRef(group="apps", version="v1").group_version == "apps/v1"
        assert ResourceRef(version="v1").group_version == "v1"
        assert ResourceRef(api_version="apps/v1", version="ignored").group_version == "apps/v1"

    @pytest.mark.unit
    def test_from_dict_defaults_scope(self):
        from kubectl_duck_hunter.collection.types import ResourceRef

        ref = ResourceRef.from_dict({"apiVersion": "v1", "resource": "services"})
        assert ref.scope == "Namespaced"
        assert ref.resource == "services"
        assert ref.kind == ""

        ref = ResourceRef.from_dict({"group": "x.io", "version": "v1", "kind": "X", "scope": "Cluster"})
        assert ref.group_version == "x.io/v1"
        assert ref.scope == "Cluster"


class TestResourceMeta:

    @pytest.mark.unit
    def test_group_and_version(self):
        from kubectl_duck_hunter.collection.types import ResourceMeta

        meta = ResourceMeta(api_version="teach.me.how/v2", kind="Ducky")
        assert meta.group == "teach.me.how"
        assert meta.version == "v2"
        assert meta.key == ("teach.me.how/v2", "Ducky")

        core = ResourceMeta(api_version="v1", kind="Service")
        assert core.group == ""
        assert core.version == "v1"


class TestCustomResourceDefinition:

    @pytest.mark.unit
    def test_from_dict(self):
        from kubectl_duck_hunter.collection.types import CustomResourceDefinition

        crd = CustomResourceDefinition.from_dict({
            "metadata": {
                "name": "duckies.teach.me.how",
                "labels": {"teach.me.how/ducky": "true"},
                "annotations": {"duckies.teach.me.how/v1": "v2"},
            },
            "spec": {
                "group": "teach.me.how",
                "names": {"kind": "Ducky", "plural": "duckies"},
                "scope": "Cluster",
                "versions": [
                    {"name": "v1", "served": False, "storage": False},
                    {"name": "v2", "served": True, "storage": True},
                ],
            },
        })
        assert crd.name == "duckies.teach.me.how"
        assert crd.kind == "Ducky"
        assert crd.labels == {"teach.me.how/ducky": "true"}
        assert [m.api_version for m in crd.served_metas()] == ["teach.me.how/v2"]
        assert crd.served_metas()[0].scope == "Cluster"

    @pytest.mark.unit
    def test_from_dict_missing_metadata(self):
        from kubectl_duck_hunter.collection.types import CustomResourceDefinition

        crd = CustomResourceDefinition.from_dict({"spec": {"group": "", "names": {"kind": "Thing"}}})
        assert crd.labels == {}
        assert crd.annotations == {}
        assert crd.served_metas() == []
