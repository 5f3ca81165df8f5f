"""Tests for taxos.renderer -- template filters and TypeScript generation."""

from __future__ import annotations

from pathlib import Path

import pytest

from taxos.exceptions import OutputError
from taxos.models import ConverterContext, NormalizedSpec, Settings
from taxos.normalizer import normalize
from taxos.parser import parse_spec
from taxos.renderer import (
    HEADER,
    create_environment,
    generate_sources,
    jsdoc,
    render_definition,
    render_path,
    request_config,
    response_type,
    ts_key,
)
from taxos.writer import write_ir


@pytest.fixture
def generated(swagger2_ir: NormalizedSpec, settings: Settings) -> Path:
    """Write the Swagger IR, render it, and return the generated API root."""
    write_ir(swagger2_ir, settings)
    generate_sources(settings)
    return Path(settings.src_out_dir) / "api"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    """Test the template filters."""

    def test_ts_key_identifier(self) -> None:
        assert ts_key("petId") == "petId"
        assert ts_key("$ref") == "$ref"

    def test_ts_key_quoted(self) -> None:
        assert ts_key("X-Trace") == '"X-Trace"'
        assert ts_key("2fa") == '"2fa"'

    def test_jsdoc_single_line(self) -> None:
        assert jsdoc("A pet") == "/** A pet */"

    def test_jsdoc_multi_line(self) -> None:
        assert jsdoc("first\nsecond", "  ") == "  /**\n   * first\n   * second\n   */"

    def test_jsdoc_escapes_terminator(self) -> None:
        assert "*/ " not in jsdoc("a */ b")

    def test_response_type_prefers_2xx(self, swagger2_ir: NormalizedSpec) -> None:
        op = swagger2_ir.paths["/pets"].operations["get"]
        assert response_type(op) == "(Pet)[]"

    def test_response_type_falls_back_to_any(self, swagger2_ir: NormalizedSpec) -> None:
        op = swagger2_ir.paths["/pets/{petId}"].operations["delete"]
        assert response_type(op) == "any"

    def test_request_config_query(self, swagger2_ir: NormalizedSpec) -> None:
        op = swagger2_ir.paths["/pets"].operations["get"]
        assert request_config(op) == "{ ...{ params: params.query }, ...config }"

    def test_request_config_headers(self, swagger2_ir: NormalizedSpec) -> None:
        op = swagger2_ir.paths["/pets/{petId}"].operations["delete"]
        assert request_config(op) == "{ headers: params.header, ...config }"

    def test_request_config_leaves_out_cookies(self, ctx: ConverterContext) -> None:
        raw = {
            "openapi": "3.0.3",
            "info": {"title": "Cookies", "version": "1"},
            "paths": {
                "/me": {
                    "get": {
                        "operationId": "getMe",
                        "parameters": [
                            {"name": "session", "in": "cookie", "schema": {"type": "string"}}
                        ],
                        "responses": {},
                    }
                }
            },
        }
        path = normalize(parse_spec(raw), ctx).paths["/me"]
        assert request_config(path.operations["get"]) == "{ ...config }"

        source = render_path(create_environment(), path)
        assert "  cookie?: {" in source
        assert "    session?: string;" in source
        assert 'return apiContext.axios.get("/me", { ...config });' in source


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestRenderDefinition:
    """Test rendering definition files."""

    def test_interface(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_definition(create_environment(), swagger2_ir.schemas["Pet"])
        assert source.startswith(HEADER)
        assert 'import { Tag } from "@/api/api/definitions/Tag";' in source
        assert 'import { Category } from "@/api/api/definitions/Category";' in source
        assert "export interface Pet {" in source
        assert "  id: number;" in source
        assert "  /** pet status in the store */" in source
        assert '  status?: "available" | "pending" | "sold";' in source
        assert "  tags?: (Tag)[];" in source
        assert "  parent?: Pet;" in source
        assert "import { Pet }" not in source

    def test_type_alias(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_definition(create_environment(), swagger2_ir.schemas["PetList"])
        assert 'import { Pet } from "@/api/api/definitions/Pet";' in source
        assert "export type PetList = (Pet)[];" in source

    def test_map_alias(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_definition(create_environment(), swagger2_ir.schemas["Labels"])
        assert "export type Labels = {[k: string]: (Tag)};" in source


class TestRenderPath:
    """Test rendering path modules."""

    def test_imports_every_ref(self, swagger2_ir: NormalizedSpec) -> None:
        path = swagger2_ir.paths["/pets"]
        source = render_path(create_environment(), path)
        for name, module in path.ts_refs.items():
            assert f'import {{ {name} }} from "{module}";' in source

    def test_get_with_query(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_path(create_environment(), swagger2_ir.paths["/pets"])
        assert "export interface GetParams {" in source
        assert "  query?: {" in source
        assert '    status?: ("available" | "pending" | "sold")[];' in source
        assert "export type GetResponse = (Pet)[];" in source
        assert "export type FindPetsParams = GetParams;" in source
        assert (
            'return apiContext.axios.get("/pets", { ...{ params: params.query }, ...config });'
            in source
        )

    def test_post_with_body(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_path(create_environment(), swagger2_ir.paths["/pets"])
        assert "  data: NewPet;" in source
        assert 'return apiContext.axios.post("/pets", params.data, { ...config });' in source

    def test_delete_export_name(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_path(create_environment(), swagger2_ir.paths["/pets/{petId}"])
        assert "export function delete_(" in source
        assert "/** @deprecated */" in source
        assert (
            "return apiContext.axios.delete(`/pets/${params.path.petId}`, "
            "{ headers: params.header, ...config });"
        ) in source

    def test_form_upload(self, swagger2_ir: NormalizedSpec) -> None:
        source = render_path(create_environment(), swagger2_ir.paths["/pets/{petId}/photo"])
        assert 'import { objectToFormData } from "@/api/utils/objectToFormData";' in source
        assert "  formData: {" in source
        assert (
            "return apiContext.axios.post(`/pets/${params.path.petId}/photo`, "
            "objectToFormData(params.formData), { ...config });"
        ) in source

    def test_quoted_header_key(self, openapi3_ir: NormalizedSpec) -> None:
        source = render_path(create_environment(), openapi3_ir.paths["/pets"])
        assert '    "X-Trace"?: string;' in source


# ---------------------------------------------------------------------------
# generate_sources
# ---------------------------------------------------------------------------


class TestGenerateSources:
    """Test the full source tree generation."""

    def test_layout(self, generated: Path) -> None:
        files = {p.relative_to(generated).as_posix() for p in generated.rglob("*.ts")}
        assert files == {
            "utils/objectToFormData.ts",
            "api/utils/apiContext.ts",
            "api/paths/v2/pets/index.ts",
            "api/paths/v2/pets/_petId/index.ts",
            "api/paths/v2/pets/_petId/photo/index.ts",
            "api/definitions/Pet/index.d.ts",
            "api/definitions/NewPet/index.d.ts",
            "api/definitions/Tag/index.d.ts",
            "api/definitions/Category/index.d.ts",
            "api/definitions/Error/index.d.ts",
            "api/definitions/PetList/index.d.ts",
            "api/definitions/Labels/index.d.ts",
        }

    def test_every_file_has_header(self, generated: Path) -> None:
        for path in generated.rglob("*.ts"):
            assert path.read_text(encoding="utf-8").startswith(HEADER), path

    def test_api_context_base_url(self, generated: Path) -> None:
        source = (generated / "api" / "utils" / "apiContext.ts").read_text(encoding="utf-8")
        assert 'export const baseURL = "https://petstore.example.com/v2";' in source
        assert "export const apiContext" in source

    def test_object_to_form_data_helper(self, generated: Path) -> None:
        source = (generated / "utils" / "objectToFormData.ts").read_text(encoding="utf-8")
        assert "export function objectToFormData(" in source

    def test_returns_source_and_target(
        self, swagger2_ir: NormalizedSpec, settings: Settings
    ) -> None:
        write_ir(swagger2_ir, settings)
        rendered = generate_sources(settings)
        pet = next(r for r in rendered if r.target.name == "index.d.ts" and r.target.parent.name == "Pet")
        assert pet.source.endswith(str(Path("definitions") / "Pet" / "spec.json"))

    def test_filter(self, swagger2_ir: NormalizedSpec, settings: Settings) -> None:
        write_ir(swagger2_ir, settings)
        wanted = Path(settings.src_out_dir) / "api" / "api" / "definitions" / "Tag" / "index.d.ts"
        filtered = settings.model_copy(update={"out_filter": [str(wanted)]})

        rendered = generate_sources(filtered)

        assert [r.target for r in rendered] == [wanted]

    def test_missing_ir(self, settings: Settings) -> None:
        with pytest.raises(OutputError, match="taxos convert"):
            generate_sources(settings)

    def test_corrupt_ir(self, settings: Settings) -> None:
        whole = Path(settings.swagger_out_dir) / "api" / "spec.json"
        whole.parent.mkdir(parents=True)
        whole.write_text("{not json", encoding="utf-8")
        with pytest.raises(OutputError, match="Invalid IR file"):
            generate_sources(settings)
