import pytest
from fastapi.testclient import TestClient

from vsgraph.noderegistry.NodeRegistry import FILTER_PRESETS
from vsgraph.server.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestServerRoutes:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_filters(self, client):
        response = client.get("/api/filters")
        assert response.status_code == 200
        palette = response.json()
        assert len(palette) == len(FILTER_PRESETS)
        crop = next(p for p in palette if p["filterType"] == "crop")
        assert crop["pluginNamespace"] == "std"
        assert crop["function"] == "Crop"
        assert crop["parameters"][0] == {"name": "left", "type": "int", "default": 0}

    def test_compile(self, client, document):
        response = client.post("/api/compile", json=document)
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["error"] is None
        assert body["order"] == ["s1", "f1", "o1"]
        assert body["script"].endswith("fx_f1_1 = core.std.Crop(src_s1_0, left=10)\nfx_f1_1.set_output(0)\n")

    def test_compile_annotated(self, client, document):
        response = client.post("/api/compile", params={"annotate": "true"}, json=document)
        assert "# Source: Video Source\n" in response.json()["script"]

    def test_compile_error_is_422(self, client, document):
        document["nodes"] = [n for n in document["nodes"] if n["type"] != "Source"]
        document["connections"] = document["connections"][1:]
        response = client.post("/api/compile", json=document)
        assert response.status_code == 422
        body = response.json()
        assert body["ok"] is False
        assert body["script"] is None
        assert body["error"] == {
            "kind": "MissingSource",
            "message": "No source node found",
            "nodeIds": [],
        }

    def test_dangling_input_reports_node(self, client, document):
        document["connections"] = document["connections"][1:]
        response = client.post("/api/compile", json=document)
        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "DanglingInput"
        assert response.json()["error"]["nodeIds"] == ["f1"]

    def test_schema_error_is_400(self, client, document):
        document["connections"][0]["targetNodeId"] = "ghost"
        response = client.post("/api/compile", json=document)
        assert response.status_code == 400
        assert "not found in nodes" in response.json()["detail"]

    @pytest.mark.parametrize("payload", [
        {"nodes": ["not-an-object"], "connections": []},
        {"nodes": [], "connections": {}},
        {"nodes": []},
        ["nodes"],
        "graph.vsgraph",
    ])
    def test_malformed_document_is_400(self, client, payload):
        """Structural problems are schema errors, never the 422 used for compile errors."""
        response = client.post("/api/compile", json=payload)
        assert response.status_code == 400
        assert isinstance(response.json()["detail"], str)

    def test_bad_parameter_value_is_400(self, client, document):
        document["nodes"][1]["parameters"][0]["value"] = "abc"
        response = client.post("/api/compile", json=document)
        assert response.status_code == 400
        assert "parameters[0]" in response.json()["detail"]

    def test_null_optional_fields_accepted(self, client, document):
        document["name"] = None
        document["createdAt"] = None
        response = client.post("/api/compile", json=document)
        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_bool_parameter_compiles_to_declared_kind(self, client, document):
        document["nodes"][1]["parameters"].append({"name": "dh", "value": "false", "type": "bool"})
        response = client.post("/api/compile", json=document)
        assert "fx_f1_1 = core.std.Crop(src_s1_0, left=10, dh=False)\n" in response.json()["script"]


class TestCreateFilterNode:

    def test_create_from_palette(self, client):
        response = client.post("/api/filters/resize/nodes", json={"x": 40, "y": 80})
        assert response.status_code == 201
        node = response.json()
        assert node["type"] == "Filter"
        assert node["filterType"] == "resize"
        assert (node["pluginNamespace"], node["function"]) == ("resize", "Lanczos")
        assert (node["x"], node["y"]) == (40.0, 80.0)
        assert node["parameters"][0] == {"name": "width", "value": 1920, "type": "int"}

    def test_position_defaults(self, client):
        node = client.post("/api/filters/crop/nodes", json={}).json()
        assert (node["x"], node["y"]) == (0.0, 0.0)

    def test_unknown_filter_type(self, client):
        response = client.post("/api/filters/warp/nodes", json={})
        assert response.status_code == 404

    def test_bad_position_is_validation_error(self, client):
        response = client.post("/api/filters/crop/nodes", json={"x": "left"})
        assert response.status_code == 422
