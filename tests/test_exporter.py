"""Tests for the exporter layer."""

import json

import pytest

from code_link.errors import OutputError
from code_link.exporter import (
    bundle_sources,
    generate_manifest,
    write_bundle,
    write_export_map,
    writeable_file,
)
from code_link.graph import Module, ModuleCollection
from code_link.models import LinkResult


class TestWriteableFile:
    def test_creates_parent_directories(self, tmp_path):
        target = writeable_file(tmp_path / "a" / "b" / "out.js", "out/combined.js")
        assert target == (tmp_path / "a" / "b" / "out.js").resolve()
        assert target.parent.is_dir()
        assert not target.exists()

    def test_directory_gets_default_name(self, tmp_path):
        target = writeable_file(f"{tmp_path}/", "out/combined.js")
        assert target.name == "combined.js"
        assert target.parent == tmp_path.resolve()

    def test_existing_directory_gets_default_name(self, tmp_path):
        (tmp_path / "dist").mkdir()
        target = writeable_file(tmp_path / "dist", "out/combined.js")
        assert target == (tmp_path / "dist" / "combined.js").resolve()

    def test_blank_path_uses_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert writeable_file("", "out/combined.js") == (tmp_path / "out" / "combined.js").resolve()

    def test_refuses_overwrite(self, tmp_path):
        existing = tmp_path / "out.js"
        existing.write_text("old")
        with pytest.raises(OutputError):
            writeable_file(existing, "out/combined.js")
        assert writeable_file(existing, "out/combined.js", overwrite=True) == existing.resolve()

    def test_refuses_hidden(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(OutputError):
            writeable_file(".out.js", "out/combined.js")
        with pytest.raises(OutputError):
            writeable_file("build/.cache/out.js", "out/combined.js")

    def test_refuses_file_as_directory(self, tmp_path):
        (tmp_path / "blocker").write_text("")
        with pytest.raises(OutputError):
            writeable_file(tmp_path / "blocker" / "out.js", "out/combined.js")

    def test_default_cannot_be_directory(self, tmp_path):
        with pytest.raises(OutputError):
            writeable_file(tmp_path / "x.js", "out/")


class TestBundle:
    def test_sources_once_in_order(self):
        modules = [
            Module("lib", "lib.js"),
            Module("orphan"),
            Module("button", "ui.js"),
            Module("panel", "ui.js"),
            Module("app", "app.js"),
        ]
        assert bundle_sources(modules) == ["lib.js", "ui.js", "app.js"]

    def test_write_bundle(self, tmp_path):
        (tmp_path / "lib.js").write_text("var lib;\n")
        (tmp_path / "app.js").write_text("var app;\n\n")
        modules = [Module("lib", str(tmp_path / "lib.js")), Module("app", str(tmp_path / "app.js"))]
        out = write_bundle(modules, tmp_path / "bundle.js")
        assert out.read_text() == "var lib;\nvar app;\n"


def test_write_export_map(tmp_path):
    collection = ModuleCollection()
    collection.connect("app", "lib")
    target = write_export_map(collection, tmp_path / "map.gv")
    assert target.read_text() == collection.to_dot() + "\n"
    with pytest.raises(OutputError):
        write_export_map(collection, tmp_path / "map.gv")


def test_generate_manifest(tmp_path):
    collection = ModuleCollection()
    collection.add("app", "app.js").add_export()
    collection.connect("app", "lib")
    result = LinkResult(
        order=collection.serialize(),
        stats=collection.analyse(),
        number_of_modules=collection.number_of_modules,
        number_of_dependencies=collection.number_of_dependencies,
        files_created=[tmp_path / "app.js"],
    )
    path = generate_manifest(result, tmp_path, tmp_path)
    manifest = json.loads(path.read_text())
    assert manifest["total_modules"] == 2
    assert manifest["total_dependencies"] == 1
    assert [m["name"] for m in manifest["buckets"][0]["modules"]] == ["lib", "app"]
    assert manifest["buckets"][0]["modules"][1]["exports"] == ["app"]
    assert manifest["stats"]["orphan_modules"] == ["lib"]
    assert manifest["files_created"] == [str(tmp_path / "app.js")]
