"""Tests for the OpenAPI 3.x adapter (taxos.parser.openapi)."""

from __future__ import annotations

import copy
from typing import Any

from taxos.models import (
    ArraySchema,
    IntegerSchema,
    ParameterLocation,
    RefSchema,
    Spec,
    SpecDialect,
    StringSchema,
)
from taxos.parser.openapi import parse_openapi


def _minimal(paths: dict[str, Any], schemas: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "openapi": "3.0.3",
        "info": {"title": "Mini", "version": "1"},
        "paths": paths,
        "components": {"schemas": schemas or {}},
    }


class TestDocumentLevel:
    """Test info, servers and components."""

    def test_dialect_and_info(self, openapi3_spec: Spec) -> None:
        assert openapi3_spec.dialect == SpecDialect.OPENAPI_3
        assert openapi3_spec.spec_version == "3.0.3"
        assert openapi3_spec.title == "Petstore OAS"

    def test_servers_with_variable_defaults(self, openapi3_spec: Spec) -> None:
        server = openapi3_spec.servers[0]
        assert server.url == "https://{region}.petstore.example.com/v3"
        assert server.variables == {"region": "eu"}

    def test_components_become_schemas(self, openapi3_spec: Spec) -> None:
        assert list(openapi3_spec.schemas) == ["Pet", "NewPet", "Owner", "Error"]


class TestRequestBodies:
    """Test request bodies turned into parameters."""

    def test_json_body_becomes_body_parameter(self, openapi3_spec: Spec) -> None:
        op = openapi3_spec.paths["/pets"].operations["post"]
        body = op.request_body
        assert body is not None
        assert body.name == "body"
        assert body.required is True
        assert body.schema_ == RefSchema(ref="#/components/schemas/NewPet", name="NewPet")

    def test_body_name_extension(self) -> None:
        raw = _minimal(
            {
                "/things": {
                    "post": {
                        "operationId": "makeThing",
                        "requestBody": {
                            "x-codegen-request-body-name": "thing",
                            "content": {"application/json": {"schema": {"type": "string"}}},
                        },
                        "responses": {},
                    }
                }
            }
        )
        body = parse_openapi(raw).paths["/things"].operations["post"].request_body
        assert body is not None
        assert body.name == "thing"
        assert body.required is False

    def test_operation_level_body_name(self) -> None:
        raw = _minimal(
            {
                "/things": {
                    "put": {
                        "operationId": "replaceThing",
                        "x-codegen-request-body-name": "payload",
                        "requestBody": {
                            "required": True,
                            "content": {"application/json": {"schema": {"type": "object"}}},
                        },
                        "responses": {},
                    }
                }
            }
        )
        body = parse_openapi(raw).paths["/things"].operations["put"].request_body
        assert body is not None
        assert body.name == "payload"
        assert body.required is True

    def test_multipart_body_becomes_form_fields(self, openapi3_spec: Spec) -> None:
        op = openapi3_spec.paths["/pets/{petId}/photo"].operations["put"]
        form = [p for p in op.parameters if p.location == ParameterLocation.FORM_DATA]
        assert [(p.name, p.required) for p in form] == [("file", True), ("caption", False)]
        assert isinstance(form[0].schema_, StringSchema)
        assert form[0].schema_.format == "binary"
        assert op.request_body is None

    def test_urlencoded_ref_schema_is_dereferenced(self) -> None:
        raw = _minimal(
            {
                "/login": {
                    "post": {
                        "operationId": "login",
                        "requestBody": {
                            "content": {
                                "application/x-www-form-urlencoded": {
                                    "schema": {"$ref": "#/components/schemas/Credentials"}
                                }
                            }
                        },
                        "responses": {},
                    }
                }
            },
            schemas={
                "Credentials": {
                    "type": "object",
                    "required": ["user"],
                    "properties": {"user": {"type": "string"}, "password": {"type": "string"}},
                }
            },
        )
        op = parse_openapi(raw).paths["/login"].operations["post"]
        assert [(p.name, p.location, p.required) for p in op.parameters] == [
            ("user", ParameterLocation.FORM_DATA, True),
            ("password", ParameterLocation.FORM_DATA, False),
        ]

    def test_form_body_without_properties(self) -> None:
        raw = _minimal(
            {
                "/upload": {
                    "post": {
                        "operationId": "upload",
                        "requestBody": {
                            "required": True,
                            "content": {"multipart/form-data": {"schema": {"type": "object"}}},
                        },
                        "responses": {},
                    }
                }
            }
        )
        op = parse_openapi(raw).paths["/upload"].operations["post"]
        assert [(p.name, p.location, p.required) for p in op.parameters] == [
            ("body", ParameterLocation.FORM_DATA, True)
        ]

    def test_json_preferred_over_form(self) -> None:
        raw = _minimal(
            {
                "/pets": {
                    "post": {
                        "operationId": "addPet",
                        "requestBody": {
                            "content": {
                                "multipart/form-data": {"schema": {"type": "object"}},
                                "application/json": {"schema": {"type": "integer"}},
                            }
                        },
                        "responses": {},
                    }
                }
            }
        )
        body = parse_openapi(raw).paths["/pets"].operations["post"].request_body
        assert body is not None
        assert isinstance(body.schema_, IntegerSchema)


class TestParametersAndResponses:
    """Test parameter and response parsing."""

    def test_header_and_query_parameters(self, openapi3_spec: Spec) -> None:
        op = openapi3_spec.paths["/pets"].operations["get"]
        assert [(p.name, p.location) for p in op.parameters] == [
            ("limit", ParameterLocation.QUERY),
            ("X-Trace", ParameterLocation.HEADER),
        ]

    def test_parameter_content_schema(self) -> None:
        raw = _minimal(
            {
                "/search": {
                    "get": {
                        "operationId": "search",
                        "parameters": [
                            {
                                "name": "filter",
                                "in": "query",
                                "content": {"application/json": {"schema": {"type": "array", "items": {"type": "string"}}}},
                            },
                            {"name": "session", "in": "cookie", "schema": {"type": "string"}},
                        ],
                        "responses": {},
                    }
                }
            }
        )
        op = parse_openapi(raw).paths["/search"].operations["get"]
        assert isinstance(op.parameters[0].schema_, ArraySchema)
        assert op.parameters[1].location == ParameterLocation.COOKIE

    def test_json_response_schema(self, openapi3_spec: Spec) -> None:
        responses = openapi3_spec.paths["/pets"].operations["post"].responses
        assert responses["201"].schema_ == RefSchema(ref="#/components/schemas/Pet", name="Pet")
        assert responses["default"].schema_ == RefSchema(
            ref="#/components/schemas/Error", name="Error"
        )

    def test_vendor_json_response(self) -> None:
        raw = _minimal(
            {
                "/x": {
                    "get": {
                        "operationId": "getX",
                        "responses": {
                            "200": {
                                "description": "ok",
                                "content": {
                                    "text/plain": {"schema": {"type": "integer"}},
                                    "application/vnd.api+json": {"schema": {"type": "string"}},
                                },
                            }
                        },
                    }
                }
            }
        )
        response = parse_openapi(raw).paths["/x"].operations["get"].responses["200"]
        assert isinstance(response.schema_, StringSchema)

    def test_response_without_content(self, openapi3_spec: Spec) -> None:
        response = openapi3_spec.paths["/pets/{petId}"].operations["delete"].responses["204"]
        assert response.schema_ is None

    def test_missing_operation_id_derived(self, openapi3_spec: Spec) -> None:
        op = openapi3_spec.paths["/pets/{petId}"].operations["delete"]
        assert op.operation_id == "deletePetsPetId"

    def test_path_parameter_forced_required(self, openapi3_raw: dict[str, Any]) -> None:
        raw = copy.deepcopy(openapi3_raw)
        raw["paths"]["/pets/{petId}"]["get"]["parameters"][0]["required"] = False
        op = parse_openapi(raw).paths["/pets/{petId}"].operations["get"]
        assert op.parameters[0].required is True

    def test_null_tags(self) -> None:
        raw = _minimal({"/x": {"get": {"operationId": "getX", "tags": None, "responses": {}}}})
        assert parse_openapi(raw).paths["/x"].operations["get"].tags == []
