import copy
import json

import pytest

from vsgraph.compiler.schema import SchemaError, load_file, validate, validate_file


def _break(document, mutate):
    data = copy.deepcopy(document)
    mutate(data)
    return data


class TestSchemaValidate:

    def test_valid_document(self, document):
        validate(document)

    def test_minimal_document(self):
        validate({"nodes": [], "connections": []})

    @pytest.mark.parametrize("data", [
        [],
        {"nodes": []},
        {"connections": []},
        {"nodes": {}, "connections": []},
        {"nodes": [], "connections": [], "name": 3},
    ])
    def test_malformed_root(self, data):
        with pytest.raises(SchemaError):
            validate(data)

    def test_duplicate_node_id(self, document):
        data = _break(document, lambda d: d["nodes"].append(dict(d["nodes"][0])))
        with pytest.raises(SchemaError, match="duplicate node id 's1'"):
            validate(data)

    def test_unknown_node_type(self, document):
        data = _break(document, lambda d: d["nodes"][0].update(type="Merge"))
        with pytest.raises(SchemaError, match="unknown node type"):
            validate(data)

    def test_non_numeric_position(self, document):
        data = _break(document, lambda d: d["nodes"][0].update(x="left"))
        with pytest.raises(SchemaError):
            validate(data)

    def test_filter_requires_function(self, document):
        data = _break(document, lambda d: d["nodes"][1].update(function=""))
        with pytest.raises(SchemaError, match="'function'"):
            validate(data)

    @pytest.mark.parametrize("key,value", [
        ("pluginNamespace", "my plugin"),
        ("function", "Crop()"),
        ("function", 3),
    ])
    def test_filter_call_target_must_be_identifier(self, document, key, value):
        data = _break(document, lambda d: d["nodes"][1].update({key: value}))
        with pytest.raises(SchemaError, match=f"'{key}'"):
            validate(data)

    def test_duplicate_parameter_name(self, document):
        data = _break(document, lambda d: d["nodes"][1]["parameters"][1].update(name="left"))
        with pytest.raises(SchemaError, match="duplicate parameter 'left'"):
            validate(data)

    def test_parameter_name_must_be_identifier(self, document):
        data = _break(document, lambda d: d["nodes"][1]["parameters"][0].update(name="left edge"))
        with pytest.raises(SchemaError):
            validate(data)

    def test_parameter_type_must_be_known(self, document):
        data = _break(document, lambda d: d["nodes"][1]["parameters"][0].update(type="matrix"))
        with pytest.raises(SchemaError, match="Unknown parameter type"):
            validate(data)

    @pytest.mark.parametrize("index", [-1, "0", True, 1.5])
    def test_bad_output_index(self, document, index):
        data = _break(document, lambda d: d["nodes"][2].update(outputIndex=index))
        with pytest.raises(SchemaError):
            validate(data)

    def test_duplicate_output_index(self, document):
        extra = {"id": "o2", "type": "Output", "outputIndex": 0}
        data = _break(document, lambda d: d["nodes"].append(extra))
        with pytest.raises(SchemaError, match="duplicate output index 0"):
            validate(data)

    def test_missing_output_index_counts_as_zero(self, document):
        extra = {"id": "o2", "type": "Output"}
        data = _break(document, lambda d: d["nodes"].append(extra))
        with pytest.raises(SchemaError, match="duplicate output index"):
            validate(data)

    def test_connection_to_unknown_node(self, document):
        data = _break(document, lambda d: d["connections"][0].update(targetNodeId="nope"))
        with pytest.raises(SchemaError, match="not found"):
            validate(data)

    def test_connection_from_output_node_rejected(self, document):
        conn = {"sourceNodeId": "o1", "sourceConnectorName": "clip",
                "targetNodeId": "f1", "targetConnectorName": "clip"}
        data = _break(document, lambda d: d["connections"].append(conn))
        with pytest.raises(SchemaError, match="no output connector"):
            validate(data)

    def test_connection_into_source_rejected(self, document):
        conn = {"sourceNodeId": "f1", "sourceConnectorName": "clip",
                "targetNodeId": "s1", "targetConnectorName": "clip"}
        data = _break(document, lambda d: d["connections"].append(conn))
        with pytest.raises(SchemaError, match="no input connector"):
            validate(data)

    def test_input_connected_twice(self, document):
        data = _break(document, lambda d: d["connections"].append(dict(d["connections"][1])))
        with pytest.raises(SchemaError, match="already connected"):
            validate(data)

    def test_connection_missing_field(self, document):
        data = _break(document, lambda d: d["connections"][0].pop("targetConnectorName"))
        with pytest.raises(SchemaError, match="targetConnectorName"):
            validate(data)

    def test_schema_error_is_value_error(self):
        assert issubclass(SchemaError, ValueError)


class TestSchemaFiles:

    def test_validate_file(self, tmp_path, document):
        path = tmp_path / "crop.vsgraph"
        path.write_text(json.dumps(document), encoding="utf-8")
        assert validate_file(path) == document

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.vsgraph"
        path.write_text("{nodes: ", encoding="utf-8")
        with pytest.raises(SchemaError, match="invalid JSON"):
            load_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            validate_file(tmp_path / "absent.vsgraph")
