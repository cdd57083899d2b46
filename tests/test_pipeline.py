"""Tests for the full pipeline."""

import json
from pathlib import Path

import pytest

from code_link.errors import (
    CyclicDependency,
    DuplicateDefinition,
    DuplicateEdge,
    OutputError,
    UndefinedModules,
)
from code_link.models import LinkConfig, ModuleDeclaration
from code_link.pipeline import build_collection, run_link, run_scan

FIXTURES = Path(__file__).parent / "fixtures"
PROJECT = FIXTURES / "project"


def _names(order):
    return [[m.name for m in bucket] for bucket in order]


def _write(root, files):
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)


def test_scan():
    declarations = run_scan(LinkConfig(source_dir=PROJECT))
    assert len(declarations) == 6


def test_build_collection_defines_before_connecting():
    declarations = [
        ModuleDeclaration("app", "app.js", requires=["lib"], exports=[None]),
        ModuleDeclaration("lib", "lib.js"),
    ]
    collection = build_collection(declarations)
    assert collection.get("lib").source == "lib.js"
    assert collection.get("app").exports == ["app"]
    assert collection.number_of_dependencies == 1


def test_build_collection_duplicate_module():
    declarations = [
        ModuleDeclaration("app", "a.js"),
        ModuleDeclaration("app", "b.js"),
    ]
    with pytest.raises(DuplicateDefinition):
        build_collection(declarations)


def test_build_collection_duplicate_requirement():
    with pytest.raises(DuplicateEdge):
        build_collection([ModuleDeclaration("app", "a.js", requires=["lib", "lib"])])


def test_project_order(tmp_path):
    result = run_link(LinkConfig(source_dir=PROJECT, destination=tmp_path / "out" / "all.js"))
    assert _names(result.order) == [
        ["lib", "collection", "core"],
        ["standalone"],
        ["widgets.button", "widgets.panel"],
    ]
    assert result.number_of_modules == 6
    assert result.number_of_dependencies == 4
    assert result.stats.orphan_modules == []
    assert result.files_created == [(tmp_path / "out" / "all.js").resolve()]


def test_project_bundle_content(tmp_path):
    destination = tmp_path / "all.js"
    run_link(LinkConfig(source_dir=PROJECT, destination=destination))
    bundle = destination.read_text()

    positions = [
        bundle.index("@module lib"),
        bundle.index("@module collection"),
        bundle.index("@module core"),
        bundle.index("@module standalone"),
        bundle.index("@module widgets.button"),
    ]
    assert positions == sorted(positions)
    # ui.js defines two modules but is written once
    assert bundle.count("@module widgets.panel") == 1


def test_refuses_existing_destination(tmp_path):
    destination = tmp_path / "all.js"
    destination.write_text("keep me")
    with pytest.raises(OutputError, match="Cannot overwrite"):
        run_link(LinkConfig(source_dir=PROJECT, destination=destination))
    assert destination.read_text() == "keep me"

    run_link(LinkConfig(source_dir=PROJECT, destination=destination, overwrite=True))
    assert "@module core" in destination.read_text()


def test_test_mode_writes_nothing(tmp_path):
    destination = tmp_path / "out" / "all.js"
    result = run_link(LinkConfig(source_dir=PROJECT, destination=destination, test=True))
    assert len(result.order) == 3
    assert result.files_created == []
    assert not (tmp_path / "out").exists()


def test_cycle_aborts(tmp_path):
    destination = tmp_path / "all.js"
    with pytest.raises(CyclicDependency) as exc:
        run_link(LinkConfig(source_dir=FIXTURES / "cyclic", destination=destination))
    assert exc.value.name in {"a", "b", "c"}
    assert not destination.exists()


def test_orphans_warn(tmp_path, caplog):
    _write(tmp_path / "src", {"app.js": "// @module app\n// @requires missing\n"})
    result = run_link(LinkConfig(source_dir=tmp_path / "src", destination=tmp_path / "all.js"))
    assert [m.name for m in result.stats.orphan_modules] == ["missing"]
    assert "missing" in caplog.text
    assert (tmp_path / "all.js").read_text() == "// @module app\n// @requires missing\n"


def test_orphans_strict(tmp_path):
    _write(tmp_path / "src", {"app.js": "// @module app\n// @requires missing\n"})
    with pytest.raises(UndefinedModules) as exc:
        run_link(LinkConfig(
            source_dir=tmp_path / "src", destination=tmp_path / "all.js", strict=True,
        ))
    assert exc.value.names == ["missing"]


def test_export_bundles(tmp_path):
    out = tmp_path / "out"
    result = run_link(LinkConfig(source_dir=FIXTURES / "exports", destination=out / "combined.js"))

    assert _names(result.order) == [["base", "api", "ui"], ["extra"]]
    assert result.stats.number_of_exports == 2
    assert [p.name for p in result.files_created] == ["api.js", "ui-bundle.js"]
    assert not (out / "combined.js").exists()

    api = (out / "api.js").read_text()
    assert api.index("@module base") < api.index("@module api")
    assert "@module ui" not in api
    assert "@module extra" not in api

    ui = (out / "ui-bundle.js").read_text()
    assert ui.index("@module base") < ui.index("@module ui")
    assert "@module api" not in ui


def test_export_map_and_manifest(tmp_path):
    config = LinkConfig(
        source_dir=PROJECT,
        destination=tmp_path / "out" / "all.js",
        export_map=tmp_path / "out" / "map.gv",
        manifest=True,
    )
    result = run_link(config)

    assert result.export_map_path == (tmp_path / "out" / "map.gv").resolve()
    dot = result.export_map_path.read_text()
    assert dot.startswith("digraph codelink {")
    assert '"lib"->"collection";' in dot
    assert '"standalone";' in dot

    manifest = json.loads(result.manifest_path.read_text())
    assert manifest["total_modules"] == 6
    assert len(manifest["buckets"]) == 3
    assert result.manifest_path in result.files_created


def test_progress_callback(tmp_path):
    stages = []
    run_link(
        LinkConfig(source_dir=PROJECT, destination=tmp_path / "all.js"),
        progress=lambda stage, current, total: stages.append((stage, current, total)),
    )
    assert ("Scanning", 1, 1) in stages
    assert ("Linking", 1, 1) in stages
    assert ("Writing", 1, 1) in stages


def test_trailing_separator_destination_is_a_folder(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = run_link(LinkConfig(source_dir=PROJECT, destination="dist/"))
    assert (tmp_path / "dist").is_dir()
    assert result.files_created == [(tmp_path / "dist" / "combined.js").resolve()]


def test_export_bundles_ignore_existing_destination(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    (out / "combined.js").write_text("unrelated")
    result = run_link(LinkConfig(source_dir=FIXTURES / "exports", destination=out / "combined.js"))
    assert [p.name for p in result.files_created] == ["api.js", "ui-bundle.js"]
    assert (out / "combined.js").read_text() == "unrelated"


def test_export_bundles_into_new_folder(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = run_link(LinkConfig(source_dir=FIXTURES / "exports", destination="dist/"))
    assert [p.name for p in result.files_created] == ["api.js", "ui-bundle.js"]
    assert (tmp_path / "dist" / "api.js").is_file()
    assert not (tmp_path / "dist" / "combined.js").exists()
