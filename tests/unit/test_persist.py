"""Unit tests for artifact persistence."""

import dataclasses
import re

import pytest

from certmaker.errors import GenerationError, ValidationError
from certmaker.pipeline import persist
from certmaker.pipeline.persist import build_filename, resolve_output_directory, write_artifact


class TestFilenames:
    def test_default_name_shape(self):
        name = build_filename("CERT-12345678-ABCDEFGH", "png")
        assert re.fullmatch(r"certificate_CERT-12345678-ABCDEFGH_\d{13}\.png", name)

    def test_custom_name_used_verbatim(self):
        assert build_filename("CERT-12345678-ABCDEFGH", "png", "mine.png") == "mine.png"

    def test_custom_name_gets_extension(self):
        assert build_filename("CERT-12345678-ABCDEFGH", "jpg", "mine") == "mine.jpg"

    @pytest.mark.parametrize("bad", ["../x.png", "sub/x.png", "..\\x.png", "..", " "])
    def test_custom_name_cannot_leave_directory(self, bad):
        with pytest.raises(ValidationError) as info:
            build_filename("CERT-12345678-ABCDEFGH", "png", bad)
        assert "output_file_name" in info.value.field_errors


class TestDirectories:
    def test_creates_missing_directory(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert resolve_output_directory(str(target)) == target
        assert target.is_dir()

    def test_default_directory_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setattr(persist, "settings", dataclasses.replace(persist.settings, data_dir=tmp_path))
        assert resolve_output_directory() == tmp_path / "certificates"
        assert (tmp_path / "certificates").is_dir()

    def test_unusable_directory_wrapped(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(GenerationError) as info:
            resolve_output_directory(str(blocker / "sub"))
        assert info.value.cause is not None


class TestWrite:
    def test_writes_bytes(self, tmp_path):
        path = write_artifact(b"abc", "CERT-12345678-ABCDEFGH", "jpg", str(tmp_path), "out.jpg")
        assert path == tmp_path / "out.jpg"
        assert path.read_bytes() == b"abc"

    def test_write_failure_wrapped(self, tmp_path):
        (tmp_path / "taken.jpg").mkdir()
        with pytest.raises(GenerationError, match="Failed to save"):
            write_artifact(b"abc", "CERT-12345678-ABCDEFGH", "jpg", str(tmp_path), "taken.jpg")
