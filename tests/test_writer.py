"""Tests for taxos.writer -- IR splitting, stable JSON, filters and atomic writes."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from taxos.exceptions import OutputError
from taxos.models import (
    ConverterContext,
    NormalizedSpec,
    Operation,
    PathItem,
    Settings,
    Spec,
)
from taxos.normalizer import normalize
from taxos.writer import (
    SPEC_FILENAME,
    atomic_write,
    dump_model,
    matches_filter,
    plan_ir_files,
    write_ir,
)


def _relative(paths: list[Path], root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in paths}


# ---------------------------------------------------------------------------
# atomic_write
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    """Test atomic file replacement."""

    def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.json"
        atomic_write(target, "{}\n")
        assert target.read_text(encoding="utf-8") == "{}\n"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_no_temp_file_left_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        with patch("taxos.writer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Serialisation and filters
# ---------------------------------------------------------------------------


class TestDumpModel:
    """Test IR model serialisation."""

    def test_sorted_camel_case_json(self, swagger2_ir: NormalizedSpec) -> None:
        text = dump_model(swagger2_ir.schemas["Pet"])
        data = json.loads(text)
        assert "tsRefs" in data and "isInterface" in data
        assert text == json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    def test_same_model_same_text(self, swagger2_ir: NormalizedSpec) -> None:
        assert dump_model(swagger2_ir) == dump_model(swagger2_ir)


class TestMatchesFilter:
    """Test output path filtering."""

    def test_empty_filter_matches_everything(self) -> None:
        assert matches_filter(Path("anything/spec.json"), []) is True

    def test_exact_match(self) -> None:
        assert matches_filter(Path("out/api/spec.json"), ["out/api/spec.json"]) is True

    def test_normalized_match(self) -> None:
        assert matches_filter(Path("out/api/spec.json"), ["./out//api/spec.json"]) is True

    def test_no_match(self) -> None:
        assert matches_filter(Path("out/api/spec.json"), ["out/other/spec.json"]) is False


# ---------------------------------------------------------------------------
# write_ir
# ---------------------------------------------------------------------------


class TestWriteIr:
    """Test splitting the IR into files."""

    def test_layout(self, swagger2_ir: NormalizedSpec, settings: Settings) -> None:
        root = Path(settings.swagger_out_dir)
        written = write_ir(swagger2_ir, settings)

        assert _relative(written, root) == {
            "api/spec.json",
            "api/paths/v2/pets/spec.json",
            "api/paths/v2/pets/_petId/spec.json",
            "api/paths/v2/pets/_petId/photo/spec.json",
            "api/definitions/Pet/spec.json",
            "api/definitions/NewPet/spec.json",
            "api/definitions/Tag/spec.json",
            "api/definitions/Category/spec.json",
            "api/definitions/Error/spec.json",
            "api/definitions/PetList/spec.json",
            "api/definitions/Labels/spec.json",
        }
        assert written[0] == root / "api" / SPEC_FILENAME

    def test_path_file_holds_path_record(
        self, swagger2_ir: NormalizedSpec, settings: Settings
    ) -> None:
        write_ir(swagger2_ir, settings)
        target = Path(settings.swagger_out_dir) / "api/paths/v2/pets/_petId/spec.json"
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["key"] == "/pets/{petId}"
        assert list(data["operations"]) == ["delete", "get"]
        assert data["operations"]["delete"]["methodSafe"] == "delete_"

    def test_openapi_has_no_base_path_prefix(
        self, openapi3_ir: NormalizedSpec, settings: Settings
    ) -> None:
        written = write_ir(openapi3_ir, settings)
        assert "api/paths/pets/_petId/photo/spec.json" in _relative(
            written, Path(settings.swagger_out_dir)
        )

    def test_api_name_directory(self, swagger2_spec: Spec, tmp_path: Path) -> None:
        settings = Settings(
            context=ConverterContext(api_name="petstore"),
            swagger_out_dir=str(tmp_path),
        )
        written = write_ir(normalize(swagger2_spec, settings.context), settings)
        assert all(p.relative_to(tmp_path).parts[0] == "petstore" for p in written)

    def test_byte_identical_across_runs(
        self, swagger2_spec: Spec, ctx: ConverterContext, tmp_path: Path
    ) -> None:
        outputs = []
        for run in ("one", "two"):
            settings = Settings(swagger_out_dir=str(tmp_path / run))
            written = write_ir(normalize(swagger2_spec, ctx), settings)
            outputs.append(
                {p.relative_to(tmp_path / run): p.read_bytes() for p in written}
            )
        assert outputs[0] == outputs[1]

    def test_filter_keeps_whole_spec(
        self, swagger2_ir: NormalizedSpec, settings: Settings
    ) -> None:
        root = Path(settings.swagger_out_dir)
        wanted = root / "api" / "definitions" / "Pet" / SPEC_FILENAME
        filtered = settings.model_copy(update={"out_filter": [str(wanted)]})

        written = write_ir(swagger2_ir, filtered)

        assert written == [root / "api" / SPEC_FILENAME, wanted]
        assert not (root / "api" / "paths").exists()

    def test_directory_collision(self, tmp_path: Path) -> None:
        ctx = ConverterContext(path_param_replace_value="param")
        spec = Spec(
            dialect="swagger2",
            spec_version="2.0",
            paths={
                "/a/{x}": PathItem(operations={"get": Operation(operation_id="getX", method="get")}),
                "/a/{y}": PathItem(operations={"get": Operation(operation_id="getY", method="get")}),
            },
        )
        settings = Settings(context=ctx, swagger_out_dir=str(tmp_path))
        with pytest.raises(OutputError, match="both map to"):
            plan_ir_files(normalize(spec, ctx), settings)

    def test_write_failure_is_output_error(
        self, swagger2_ir: NormalizedSpec, settings: Settings
    ) -> None:
        with patch("taxos.writer.atomic_write", side_effect=PermissionError("denied")):
            with pytest.raises(OutputError, match="Failed to write"):
                write_ir(swagger2_ir, settings)
