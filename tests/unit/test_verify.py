"""Unit tests for certificate verification and inspection."""

import hashlib

from PIL import Image

from certmaker.artifact.verify import CertificateVerifier, compute_checksum


def _write_png(path, size=(30, 20)):
    Image.new("RGB", size, (10, 20, 30)).save(path, format="PNG")
    return path


class TestVerify:
    def test_matching_checksum(self, tmp_path):
        path = _write_png(tmp_path / "c.png")
        expected = hashlib.sha256(path.read_bytes()).hexdigest()
        assert CertificateVerifier().verify(path, expected)

    def test_single_byte_mutation_fails(self, tmp_path):
        path = _write_png(tmp_path / "c.png")
        expected = compute_checksum(path.read_bytes())
        data = bytearray(path.read_bytes())
        data[-1] ^= 0x01
        path.write_bytes(bytes(data))
        assert not CertificateVerifier().verify(path, expected)

    def test_missing_file_is_false(self, tmp_path):
        assert CertificateVerifier().verify(tmp_path / "missing.png", "0" * 64) is False

    def test_directory_is_false(self, tmp_path):
        assert CertificateVerifier().verify(tmp_path, "0" * 64) is False


class TestInspect:
    def test_reports_raster_facts(self, tmp_path):
        path = _write_png(tmp_path / "c.PNG")
        info = CertificateVerifier().inspect(path)
        assert info is not None
        assert (info.width, info.height) == (30, 20)
        assert info.file_size == path.stat().st_size
        assert info.format == "png"
        assert info.checksum == compute_checksum(path.read_bytes())

    def test_non_image_is_none(self, tmp_path):
        path = tmp_path / "notes.jpg"
        path.write_text("not an image")
        assert CertificateVerifier().inspect(path) is None

    def test_missing_is_none(self, tmp_path):
        assert CertificateVerifier().inspect(tmp_path / "nope.jpg") is None
