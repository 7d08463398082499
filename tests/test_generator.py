"""
tests/test_generator.py
Integration tests for the generation pipeline, the exporter and the CLI.

Tests cover:
- PothosGenerator from schema text, DMMF JSON/YAML and in-memory documents
- Strict vs. soft validation
- Output directory cleaning
- Manual-resolver skipping recorded on the report
- ProjectExporter manifest and per-file error handling
- load_config()
- cli_main() exit codes and modes
"""

from __future__ import annotations

import io
import json
import logging
import pathlib
import textwrap
from typing import Any, Dict, List

import pytest

from pothosgen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    cli_main,
)
from pothosgen.exporters import ProjectExporter
from pothosgen.generator import PothosGenerator, load_config
from pothosgen.models import GeneratorConfig, ParsedSchema
from pothosgen.scanner import ManualResolvers
from pothosgen.templates import TemplateGenerator
from pothosgen.utils import sha256_hex


INVALID_SCHEMA: str = textwrap.dedent(
    """\
    model A {
      id Int @id
    }
    model A {
      id Int @id
    }
    """
)


def _relative_files(root: pathlib.Path) -> List[str]:
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


def _run_cli(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


# ===========================================================================
# PothosGenerator
# ===========================================================================


class TestPothosGenerator:
    """End-to-end pipeline tests."""

    def test_generate_from_schema_file(
        self,
        blog_schema_path: pathlib.Path,
        blog_schema: ParsedSchema,
        output_dir: pathlib.Path,
    ) -> None:
        report = PothosGenerator().generate_from_file(blog_schema_path, output_dir)

        assert report.success, report.summary()
        assert report.total_models == 4
        assert report.total_enums == 1
        expected = TemplateGenerator(blog_schema).generate_all()
        assert _relative_files(output_dir) == sorted(expected)
        assert report.total_files == len(expected)
        assert (output_dir / "models" / "Post.ts").read_text(encoding="utf-8") == expected[
            "models/Post.ts"
        ]

    def test_generate_from_json_document(
        self, shop_dmmf_json_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        report = PothosGenerator().generate_from_file(shop_dmmf_json_path, output_dir)
        assert report.success, report.summary()
        assert (output_dir / "models" / "Customer.ts").exists()
        assert (output_dir / "resolvers" / "findManyOrder.ts").exists()

    def test_generate_from_yaml_document(
        self, shop_dmmf_yaml_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        report = PothosGenerator().generate_from_file(shop_dmmf_yaml_path, output_dir)
        assert report.success, report.summary()
        assert (output_dir / "inputs" / "OrderWhereUniqueInput.ts").exists()

    def test_text_and_document_produce_same_tree(
        self,
        tmp_path: pathlib.Path,
        shop_schema: ParsedSchema,
        shop_dmmf: Dict[str, Any],
    ) -> None:
        from_text = tmp_path / "text"
        from_doc = tmp_path / "doc"
        PothosGenerator().generate(shop_schema, from_text)
        PothosGenerator().generate_from_document(shop_dmmf, from_doc)

        assert _relative_files(from_text) == _relative_files(from_doc)
        for rel in _relative_files(from_text):
            assert (from_text / rel).read_text(encoding="utf-8") == (from_doc / rel).read_text(
                encoding="utf-8"
            ), rel

    def test_missing_file_is_input_error(
        self, tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        report = PothosGenerator().generate_from_file(tmp_path / "nope.prisma", output_dir)
        assert not report.success
        assert len(report.input_errors) == 1
        assert not output_dir.exists()

    def test_undecodable_document_is_input_error(
        self, tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        path = tmp_path / "dmmf.json"
        path.write_text("[1, 2", encoding="utf-8")
        report = PothosGenerator().generate_from_file(path, output_dir)
        assert not report.success
        assert report.input_errors

    def test_bad_in_memory_document(self, output_dir: pathlib.Path) -> None:
        report = PothosGenerator().generate_from_document("nope", output_dir)  # type: ignore[arg-type]
        assert not report.success
        assert report.input_errors

    def test_validation_errors_soft_by_default(
        self, tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        path = tmp_path / "schema.prisma"
        path.write_text(INVALID_SCHEMA, encoding="utf-8")
        report = PothosGenerator().generate_from_file(path, output_dir)
        assert report.success
        assert report.validation_errors
        assert (output_dir / "index.ts").exists()

    def test_strict_mode_aborts_before_writing(
        self, tmp_path: pathlib.Path, output_dir: pathlib.Path
    ) -> None:
        path = tmp_path / "schema.prisma"
        path.write_text(INVALID_SCHEMA, encoding="utf-8")
        report = PothosGenerator(strict=True).generate_from_file(path, output_dir)
        assert not report.success
        assert report.validation_errors
        assert not output_dir.exists()

    def test_clean_removes_stale_files_but_keeps_gitignore(
        self, blog_schema: ParsedSchema, output_dir: pathlib.Path
    ) -> None:
        (output_dir / "models").mkdir(parents=True)
        (output_dir / "models" / "Stale.ts").write_text("old", encoding="utf-8")
        (output_dir / ".gitignore").write_text("*\n", encoding="utf-8")

        report = PothosGenerator().generate(blog_schema, output_dir)
        assert report.success
        assert not (output_dir / "models" / "Stale.ts").exists()
        assert (output_dir / ".gitignore").read_text(encoding="utf-8") == "*\n"

    def test_no_clean_keeps_stale_files(
        self, blog_schema: ParsedSchema, output_dir: pathlib.Path
    ) -> None:
        (output_dir / "models").mkdir(parents=True)
        (output_dir / "models" / "Stale.ts").write_text("old", encoding="utf-8")

        report = PothosGenerator(clean_output=False).generate(blog_schema, output_dir)
        assert report.success
        assert (output_dir / "models" / "Stale.ts").exists()

    def test_skipped_resolvers_reported(
        self, blog_schema: ParsedSchema, output_dir: pathlib.Path
    ) -> None:
        manual = ManualResolvers(queries={"posts"}, mutations={"updateOneUser"})
        report = PothosGenerator().generate(blog_schema, output_dir, manual_resolvers=manual)
        assert sorted(report.skipped_resolvers) == ["findManyPost", "updateOneUser"]
        assert not (output_dir / "resolvers" / "findManyPost.ts").exists()
        assert (output_dir / "resolvers" / "findUniquePost.ts").exists()

    def test_report_summary(self, blog_schema: ParsedSchema, output_dir: pathlib.Path) -> None:
        report = PothosGenerator().generate(blog_schema, output_dir)
        summary = report.summary()
        assert "SUCCESS" in summary
        assert "Models:           4" in summary
        assert [s.step_name for s in report.step_metrics] == [
            "Validate Schema",
            "Code Generation",
            "Export to Filesystem",
        ]

    def test_load_schema_dispatches_on_suffix(
        self,
        blog_schema_path: pathlib.Path,
        shop_dmmf_json_path: pathlib.Path,
        blog_schema: ParsedSchema,
        shop_schema: ParsedSchema,
    ) -> None:
        assert PothosGenerator.load_schema(blog_schema_path) == blog_schema
        assert PothosGenerator.load_schema(shop_dmmf_json_path) == shop_schema


# ===========================================================================
# ProjectExporter
# ===========================================================================


class TestProjectExporter:
    """Tests for ProjectExporter."""

    def test_manifest_records(self, output_dir: pathlib.Path) -> None:
        files = {"index.ts": "export {};\n", "models/A.ts": "a\nb\n"}
        result = ProjectExporter(output_dir).export(files)

        assert result.success
        assert result.errors == ()
        manifest = result.manifest
        assert manifest.total_files == 2
        assert manifest.total_lines == 3
        record = next(r for r in manifest.files if r.relative_path == "models/A.ts")
        assert record.sha256 == sha256_hex("a\nb\n")
        assert record.size_bytes == 4
        assert json.loads(manifest.to_json())["total_files"] == 2

    def test_creates_layout(self, output_dir: pathlib.Path) -> None:
        ProjectExporter(output_dir).export({})
        for sub in ("models", "enums", "inputs", "resolvers"):
            assert (output_dir / sub).is_dir()

    def test_write_error_recorded_per_file(self, output_dir: pathlib.Path) -> None:
        result = ProjectExporter(output_dir).export({"models": "clash", "index.ts": "ok\n"})
        assert not result.success
        assert len(result.errors) == 1
        assert "models" in result.errors[0]
        assert (output_dir / "index.ts").read_text(encoding="utf-8") == "ok\n"

    def test_no_temp_files_left(self, output_dir: pathlib.Path) -> None:
        ProjectExporter(output_dir).export({"a.ts": "x", "models/b.ts": "y"})
        assert not list(output_dir.rglob("*.tmp"))


# ===========================================================================
# Configuration
# ===========================================================================


class TestLoadConfig:
    """Tests for load_config()."""

    def test_missing_file_gives_defaults(self, tmp_path: pathlib.Path) -> None:
        config = load_config(tmp_path / ".gpothosrc.json")
        assert config == GeneratorConfig()
        assert config.auto_scan is True
        assert config.scan_dirs == []
        assert config.verbose is False

    def test_camel_case_keys(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / ".gpothosrc.json"
        path.write_text(json.dumps({"autoScan": False, "scanDirs": ["src"], "verbose": True}))
        config = load_config(path)
        assert config.auto_scan is False
        assert config.scan_dirs == ["src"]
        assert config.verbose is True

    def test_snake_case_keys_and_unknown_keys(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / ".gpothosrc.json"
        path.write_text(json.dumps({"auto_scan": False, "scan_dirs": ["a"], "extra": 1}))
        config = load_config(path)
        assert config.auto_scan is False
        assert config.scan_dirs == ["a"]

    @pytest.mark.parametrize(
        "content",
        ["{not json", "[1, 2]", json.dumps({"scanDirs": "src"})],
    )
    def test_invalid_config(self, tmp_path: pathlib.Path, content: str) -> None:
        path = tmp_path / ".gpothosrc.json"
        path.write_text(content)
        with pytest.raises(ValueError):
            load_config(path)


# ===========================================================================
# CLI
# ===========================================================================


class TestCli:
    """Tests for cli_main()."""

    def test_generate_success(
        self,
        blog_schema_path: pathlib.Path,
        output_dir: pathlib.Path,
        tmp_path: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run_cli(
            [
                "-s", str(blog_schema_path),
                "-o", str(output_dir),
                "--config", str(tmp_path / "absent.json"),
                "--no-scan",
            ]
        )
        assert code == EXIT_SUCCESS
        assert (output_dir / "index.ts").exists()
        assert "Generation Report" in capsys.readouterr().out

    def test_defaults_relative_to_cwd(
        self,
        blog_schema_path: pathlib.Path,
        tmp_path: pathlib.Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        assert _run_cli([]) == EXIT_SUCCESS
        assert (tmp_path / "src" / "generated" / "builder.ts").exists()

    def test_missing_schema(self, tmp_path: pathlib.Path) -> None:
        code = _run_cli(["-s", str(tmp_path / "nope.prisma"), "--config", str(tmp_path / "c.json")])
        assert code == EXIT_INPUT_ERROR

    def test_invalid_config(self, blog_schema_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        config = tmp_path / "bad.json"
        config.write_text("{oops")
        code = _run_cli(["-s", str(blog_schema_path), "--config", str(config)])
        assert code == EXIT_INPUT_ERROR

    def test_validate_only_valid(
        self,
        blog_schema_path: pathlib.Path,
        tmp_path: pathlib.Path,
        output_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run_cli(
            [
                "-s", str(blog_schema_path),
                "-o", str(output_dir),
                "--config", str(tmp_path / "c.json"),
                "--validate-only",
            ]
        )
        assert code == EXIT_SUCCESS
        assert "Schema Validation Report" in capsys.readouterr().out
        assert not output_dir.exists()

    def test_validate_only_invalid(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "schema.prisma"
        path.write_text(INVALID_SCHEMA, encoding="utf-8")
        code = _run_cli(["-s", str(path), "--config", str(tmp_path / "c.json"), "--validate-only"])
        assert code == EXIT_VALIDATION_ERROR

    def test_strict_validation_error(self, tmp_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        path = tmp_path / "schema.prisma"
        path.write_text(INVALID_SCHEMA, encoding="utf-8")
        base = ["-s", str(path), "-o", str(output_dir), "--config", str(tmp_path / "c.json"), "--no-scan"]
        assert _run_cli(base + ["--strict"]) == EXIT_VALIDATION_ERROR
        assert not output_dir.exists()
        assert _run_cli(base) == EXIT_SUCCESS

    def test_export_error(self, blog_schema_path: pathlib.Path, tmp_path: pathlib.Path) -> None:
        not_a_dir = tmp_path / "occupied"
        not_a_dir.write_text("file, not directory")
        code = _run_cli(
            [
                "-s", str(blog_schema_path),
                "-o", str(not_a_dir),
                "--config", str(tmp_path / "c.json"),
                "--no-scan",
            ]
        )
        assert code == EXIT_EXPORT_ERROR

    def test_scan_dirs_from_config_and_flags(
        self,
        blog_schema_path: pathlib.Path,
        tmp_path: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        from_config = tmp_path / "custom"
        from_flag = tmp_path / "extra"
        from_config.mkdir()
        from_flag.mkdir()
        (from_config / "q.ts").write_text('builder.queryField("posts", f);\n', encoding="utf-8")
        (from_flag / "m.ts").write_text('builder.mutationField("createOneUser", f);\n', encoding="utf-8")
        config = tmp_path / ".gpothosrc.json"
        config.write_text(json.dumps({"scanDirs": [str(from_config)]}))

        code = _run_cli(
            [
                "-s", str(blog_schema_path),
                "-o", str(output_dir),
                "--config", str(config),
                "--scan-dir", str(from_flag),
            ]
        )
        assert code == EXIT_SUCCESS
        assert not (output_dir / "resolvers" / "findManyPost.ts").exists()
        assert not (output_dir / "resolvers" / "createOneUser.ts").exists()
        assert (output_dir / "resolvers" / "findManyUser.ts").exists()

    def test_no_scan_flag_and_auto_scan_off(
        self,
        blog_schema_path: pathlib.Path,
        tmp_path: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        custom = tmp_path / "custom"
        custom.mkdir()
        (custom / "q.ts").write_text('builder.queryField("posts", f);\n', encoding="utf-8")

        base = ["-s", str(blog_schema_path), "-o", str(output_dir), "--scan-dir", str(custom)]
        assert _run_cli(base + ["--config", str(tmp_path / "c.json"), "--no-scan"]) == EXIT_SUCCESS
        assert (output_dir / "resolvers" / "findManyPost.ts").exists()

        config = tmp_path / "off.json"
        config.write_text(json.dumps({"autoScan": False}))
        assert _run_cli(base + ["--config", str(config)]) == EXIT_SUCCESS
        assert (output_dir / "resolvers" / "findManyPost.ts").exists()

    def test_quiet(self, blog_schema_path: pathlib.Path, tmp_path: pathlib.Path, output_dir: pathlib.Path) -> None:
        try:
            code = _run_cli(
                [
                    "-s", str(blog_schema_path),
                    "-o", str(output_dir),
                    "--config", str(tmp_path / "c.json"),
                    "-q",
                ]
            )
        finally:
            logging.disable(logging.NOTSET)
        assert code == EXIT_SUCCESS

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run_cli(["--version"]) == 0
        assert "pothosgen v" in capsys.readouterr().out

    def test_prisma_generator_mode(
        self,
        tmp_path: pathlib.Path,
        shop_dmmf: Dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        out = tmp_path / "generated"
        requests = [
            {"jsonrpc": "2.0", "id": 1, "method": "getManifest", "params": {}},
            {
                "jsonrpc": "2.0",
                "id": 2,
                "method": "generate",
                "params": {"dmmf": shop_dmmf, "generator": {"output": {"value": str(out)}}},
            },
        ]
        stdin = io.StringIO("\n".join(json.dumps(r) for r in requests) + "\n")
        monkeypatch.setattr("sys.stdin", stdin)

        code = _run_cli(["--prisma-generator", "--config", str(tmp_path / "c.json")])
        assert code == EXIT_SUCCESS
        responses = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        assert [r["id"] for r in responses] == [1, 2]
        assert responses[1]["result"] is None
        assert (out / "models" / "Order.ts").exists()

    def test_prisma_generator_protocol_error(
        self, tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("this is not json\n"))
        code = _run_cli(["--prisma-generator", "--config", str(tmp_path / "c.json")])
        assert code == EXIT_INPUT_ERROR
