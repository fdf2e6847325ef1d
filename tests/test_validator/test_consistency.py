"""Tests for cmdschemas.validator.consistency."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from cmdschemas.exceptions import StructuralInconsistencyError
from cmdschemas.models import CommandSchema, ParameterDescriptor, ParamType
from cmdschemas.validator import KNOWN_TYPES, validate_schema


def _valid_doc() -> dict[str, Any]:
    """A persisted-style command document that passes every check."""
    return {
        "command": "PutGadgetCommand",
        "service": "gadgets",
        "operation": "PutGadget",
        "parameters": {
            "Id": {"name": "Id", "type": "string", "required": True, "documentation": ""},
            "Count": {"name": "Count", "type": "number", "required": False, "documentation": ""},
        },
        "requiredParameters": ["Id"],
        "optionalParameters": ["Count"],
        "documentation": "Stores a gadget.",
    }


def _with(**changes: Any) -> dict[str, Any]:
    doc = copy.deepcopy(_valid_doc())
    doc.update(changes)
    return doc


class TestValidSchemas:
    def test_valid_document(self) -> None:
        result = validate_schema(_valid_doc())
        assert result.errors == []
        assert result.warnings == []
        assert result.ok

    def test_command_schema_instance(self) -> None:
        schema = CommandSchema(
            service="gadgets",
            operation="PutGadget",
            parameters={
                "Id": ParameterDescriptor(name="Id", type=ParamType.STRING, required=True),
            },
            required_parameters=["Id"],
        )
        assert validate_schema(schema).ok

    def test_empty_schema_is_not_an_error(self) -> None:
        schema = CommandSchema(service="gadgets", operation="Ping")
        result = validate_schema(schema)
        assert result.errors == []
        assert result.warnings == []

    def test_known_types_cover_param_type(self) -> None:
        assert KNOWN_TYPES == {"string", "number", "boolean", "array", "object", "unknown"}

    def test_deterministic(self) -> None:
        doc = _with(requiredParameters=["Id", "Count", "Ghost"])
        assert validate_schema(doc) == validate_schema(doc)


class TestErrors:
    @pytest.mark.parametrize(
        "field",
        ["service", "operation", "parameters", "requiredParameters", "optionalParameters"],
    )
    def test_missing_required_field(self, field: str) -> None:
        doc = _valid_doc()
        del doc[field]
        result = validate_schema(doc)
        assert any(f"missing required field '{field}'" in e for e in result.errors)

    def test_not_an_object(self) -> None:
        result = validate_schema(["not", "a", "schema"])  # type: ignore[arg-type]
        assert result.errors == ["<schema>: schema must be an object, got list"]

    def test_parameters_wrong_container(self) -> None:
        result = validate_schema(_with(parameters=[]))
        assert any("parameters must be an object" in e for e in result.errors)

    def test_list_wrong_container(self) -> None:
        result = validate_schema(_with(requiredParameters="Id"))
        assert any("requiredParameters must be an array" in e for e in result.errors)

    def test_descriptor_not_object(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"] = "string"
        result = validate_schema(doc)
        assert any("gadgets/PutGadgetCommand:Id must be an object" in e for e in result.errors)

    def test_descriptor_missing_fields(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"] = {"required": True}
        result = validate_schema(doc)
        assert "gadgets/PutGadgetCommand:Id missing field 'name'" in result.errors
        assert "gadgets/PutGadgetCommand:Id missing field 'type'" in result.errors

    def test_descriptor_wrong_name(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"]["name"] = "Identifier"
        result = validate_schema(doc)
        assert "gadgets/PutGadgetCommand:Id has wrong name: Identifier" in result.errors

    def test_null_type(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"]["type"] = None
        result = validate_schema(doc)
        assert "gadgets/PutGadgetCommand:Id has null type" in result.errors

    def test_non_boolean_required(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"]["required"] = "yes"
        result = validate_schema(doc)
        assert any("required field must be boolean" in e for e in result.errors)

    def test_required_flag_contradicts_optional_list(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Count"]["required"] = True
        result = validate_schema(doc)
        assert (
            "gadgets/PutGadgetCommand:Count is marked required but listed in optionalParameters"
            in result.errors
        )

    def test_optional_flag_contradicts_required_list(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Id"]["required"] = False
        result = validate_schema(doc)
        assert any("is marked optional but listed in requiredParameters" in e for e in result.errors)

    def test_name_in_both_lists(self) -> None:
        result = validate_schema(_with(optionalParameters=["Count", "Id"]))
        assert (
            "gadgets/PutGadgetCommand: parameters in both required and optional lists: Id"
            in result.errors
        )

    def test_listed_without_definition(self) -> None:
        result = validate_schema(_with(optionalParameters=["Count", "Ghost"]))
        assert (
            "gadgets/PutGadgetCommand: lists parameter Ghost but no definition found"
            in result.errors
        )

    def test_non_string_list_entry(self) -> None:
        result = validate_schema(_with(requiredParameters=["Id", 7]))
        assert any("entry must be a string" in e for e in result.errors)

    def test_raise_for_errors(self) -> None:
        result = validate_schema(_with(optionalParameters=["Count", "Ghost"]))
        with pytest.raises(StructuralInconsistencyError) as exc_info:
            result.raise_for_errors()
        assert exc_info.value.errors == result.errors


class TestWarnings:
    def test_defined_but_unlisted(self) -> None:
        result = validate_schema(_with(optionalParameters=[]))
        assert result.errors == []
        assert result.warnings == [
            "gadgets/PutGadgetCommand: defines parameter Count but not in required/optional lists"
        ]

    def test_unusual_type(self) -> None:
        doc = _valid_doc()
        doc["parameters"]["Count"]["type"] = "decimal"
        result = validate_schema(doc)
        assert result.errors == []
        assert result.warnings == ["gadgets/PutGadgetCommand:Count has unusual type: decimal"]

    def test_repeated_in_list(self) -> None:
        result = validate_schema(_with(requiredParameters=["Id", "Id"]))
        assert result.errors == []
        assert any("listed more than once in requiredParameters" in w for w in result.warnings)


class TestLabels:
    def test_explicit_label(self) -> None:
        result = validate_schema(_with(optionalParameters=["Count", "Ghost"]), label="x/Y")
        assert result.errors[0].startswith("x/Y:")

    def test_label_falls_back_to_operation(self) -> None:
        doc = _with(optionalParameters=["Count", "Ghost"])
        del doc["command"]
        assert validate_schema(doc).errors[0].startswith("gadgets/PutGadget:")

    def test_anonymous_label(self) -> None:
        result = validate_schema({})
        assert all(e.startswith("<schema>:") for e in result.errors)
