"""Unit tests for upload ingestion and zip export (app_creator.utils.archive, file_helpers)."""

from __future__ import annotations

import io
import zipfile

import pytest

from app_creator.models import GeneratedFile
from app_creator.utils.archive import (
    CORRUPT_ARCHIVE_MESSAGE,
    NO_TEXT_FILES_MESSAGE,
    UploadError,
    archive_filename,
    build_zip,
    ingest_directory,
    ingest_zip,
    is_zip_upload,
)
from app_creator.utils.file_helpers import _safe_normalize, is_text_file, strip_common_root

from conftest import make_zip


# ---------------------------------------------------------------------------
# file_helpers
# ---------------------------------------------------------------------------


class TestIsTextFile:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "path",
        ["src/App.tsx", "index.HTML", "styles/main.scss", ".env", ".gitignore", "Dockerfile", "web/Procfile",
         "README", "LICENSE", "icons/logo.svg", "config.yaml"],
    )
    def test_text(self, path):
        assert is_text_file(path)

    @pytest.mark.unit
    @pytest.mark.parametrize("path", ["logo.png", "font.woff2", "Makefile", "bin/app", "archive.zip", "dir/"])
    def test_not_text(self, path):
        assert not is_text_file(path)


class TestStripCommonRoot:
    @pytest.mark.unit
    def test_shared_root(self):
        out = strip_common_root([("app/a.js", "1"), ("app/src/b.js", "2")])
        assert out == [("a.js", "1"), ("src/b.js", "2")]

    @pytest.mark.unit
    def test_mixed_roots_untouched(self):
        entries = [("app/a.js", "1"), ("other/b.js", "2")]
        assert strip_common_root(entries) == entries

    @pytest.mark.unit
    def test_top_level_file_untouched(self):
        entries = [("a.js", "1"), ("app/b.js", "2")]
        assert strip_common_root(entries) == entries

    @pytest.mark.unit
    def test_prefix_without_slash_is_not_a_root(self):
        entries = [("app/a.js", "1"), ("application.js", "2")]
        assert strip_common_root(entries) == entries


class TestSafeNormalize:
    @pytest.mark.unit
    @pytest.mark.parametrize("path", ["", "   ", "/etc/passwd", "../secret", "a/../../b", ".."])
    def test_rejected(self, path):
        assert _safe_normalize(path) is None

    @pytest.mark.unit
    def test_cleaned(self):
        assert _safe_normalize("./src//index.js") == "src/index.js"
        assert _safe_normalize("src\\app.py") == "src/app.py"
        assert _safe_normalize(".env") == ".env"


# ---------------------------------------------------------------------------
# ingest_zip
# ---------------------------------------------------------------------------


class TestIngestZip:
    @pytest.mark.unit
    def test_strips_root_and_filters(self, frontend_zip):
        files = ingest_zip(frontend_zip)
        paths = [f.filePath for f in files]
        assert sorted(paths) == ["Dockerfile", "package.json", "src/App.tsx"]
        assert "todo-app" not in paths
        assert "" not in paths
        assert all(not p.startswith("todo-app/") for p in paths)

    @pytest.mark.unit
    def test_no_eligible_entries(self):
        data = make_zip({"img/a.png": b"\x89PNG", "img/b.jpg": b"\xff\xd8"})
        with pytest.raises(UploadError) as exc_info:
            ingest_zip(data)
        assert str(exc_info.value) == NO_TEXT_FILES_MESSAGE

    @pytest.mark.unit
    def test_size_cap(self):
        data = make_zip({"small.txt": "ok", "big.txt": "x" * 101, "edge.txt": "y" * 100})
        files = ingest_zip(data, max_size=100)
        assert sorted(f.filePath for f in files) == ["edge.txt", "small.txt"]

    @pytest.mark.unit
    def test_non_utf8_dropped(self):
        data = make_zip({"ok.txt": "fine", "bad.txt": b"\xff\xfe\xfa"})
        assert [f.filePath for f in ingest_zip(data)] == ["ok.txt"]

    @pytest.mark.unit
    def test_no_root_when_files_at_top_level(self):
        data = make_zip({"index.html": "<html></html>", "src/main.js": "//"})
        assert sorted(f.filePath for f in ingest_zip(data)) == ["index.html", "src/main.js"]

    @pytest.mark.unit
    def test_corrupt_archive(self):
        with pytest.raises(UploadError) as exc_info:
            ingest_zip(b"definitely not a zip")
        assert str(exc_info.value) == CORRUPT_ARCHIVE_MESSAGE


# ---------------------------------------------------------------------------
# ingest_directory
# ---------------------------------------------------------------------------


class TestIngestDirectory:
    @pytest.mark.unit
    def test_strips_selected_folder(self):
        items = [
            ("my-app/index.html", b"<html></html>"),
            ("my-app/src/app.js", b"console.log(1)"),
            ("my-app/assets/bg.png", b"\x89PNG"),
        ]
        files = ingest_directory(items)
        assert [f.filePath for f in files] == ["index.html", "src/app.js"]
        assert files[1].code == "console.log(1)"

    @pytest.mark.unit
    def test_size_cap(self):
        items = [("p/a.txt", b"a" * 11), ("p/b.txt", b"b")]
        assert [f.filePath for f in ingest_directory(items, max_size=10)] == ["b.txt"]

    @pytest.mark.unit
    def test_nothing_readable(self):
        with pytest.raises(UploadError):
            ingest_directory([("p/a.png", b"\x89PNG")])
        with pytest.raises(UploadError):
            ingest_directory([])


# ---------------------------------------------------------------------------
# build_zip / round trip
# ---------------------------------------------------------------------------


class TestExport:
    @pytest.mark.unit
    def test_single_root_folder(self):
        files = [GeneratedFile(filePath="src/index.js", code="x"), GeneratedFile(filePath="README.md", code="# r")]
        with zipfile.ZipFile(io.BytesIO(build_zip("blog-api", files))) as zf:
            assert sorted(zf.namelist()) == ["blog-api/README.md", "blog-api/src/index.js"]
            assert zf.read("blog-api/README.md") == b"# r"

    @pytest.mark.unit
    def test_unsafe_paths_skipped(self):
        files = [GeneratedFile(filePath="../evil.sh", code="rm"), GeneratedFile(filePath="ok.txt", code="ok")]
        with zipfile.ZipFile(io.BytesIO(build_zip("p", files))) as zf:
            assert zf.namelist() == ["p/ok.txt"]

    @pytest.mark.unit
    def test_archive_filename(self):
        assert archive_filename("blog-api") == "blog-api.zip"
        assert archive_filename("") == "project.zip"

    @pytest.mark.unit
    def test_round_trip(self):
        files = [
            GeneratedFile(filePath="package.json", code='{"name": "x"}'),
            GeneratedFile(filePath="src/routes/users.js", code="module.exports = {};\n"),
            GeneratedFile(filePath="config/settings.yaml", code="port: 3000\n"),
            GeneratedFile(filePath="README.md", code="# unicode ✓ ünïcödé\n"),
        ]
        back = ingest_zip(build_zip("shop-api", files))
        assert {f.filePath: f.code for f in back} == {f.filePath: f.code for f in files}

    @pytest.mark.unit
    def test_round_trip_drops_names_outside_allow_list(self):
        files = [
            GeneratedFile(filePath="main.go", code="package main\n"),
            GeneratedFile(filePath="go.mod", code="module shop\n"),
            GeneratedFile(filePath=".env.example", code="PORT=8080\n"),
            GeneratedFile(filePath="Makefile", code="run:\n\tgo run .\n"),
        ]
        data = build_zip("shop-api", files)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            assert len(zf.namelist()) == 4
        assert [f.filePath for f in ingest_zip(data)] == ["main.go"]


class TestIsZipUpload:
    @pytest.mark.unit
    def test_detection(self):
        assert is_zip_upload("project.ZIP", None)
        assert is_zip_upload("blob", "application/zip")
        assert not is_zip_upload("project.tar.gz", "application/gzip")
        assert not is_zip_upload(None, None)
