"""
Tests for resource staging — checksum verification and unpacking.
"""

import hashlib

import pytest

from formulakit.core.errors import StagingError
from formulakit.core.services.staging import cached_file, stage, verify_checksum


class TestVerifyChecksum:
    def test_match(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_bytes(b"hello")
        verify_checksum(f, "sha256:" + hashlib.sha256(b"hello").hexdigest())
        verify_checksum(f, "sha1:" + hashlib.sha1(b"hello").hexdigest().upper())

    def test_mismatch(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_bytes(b"hello")
        with pytest.raises(StagingError, match="Checksum mismatch"):
            verify_checksum(f, "sha1:" + "0" * 40)

    def test_malformed(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_bytes(b"")
        with pytest.raises(StagingError, match="Malformed"):
            verify_checksum(f, "deadbeef")

    def test_unknown_algorithm(self, tmp_path):
        f = tmp_path / "a.txt"
        f.write_bytes(b"")
        with pytest.raises(StagingError, match="Unsupported"):
            verify_checksum(f, "crc99:abcd")


class TestStage:
    def test_cached_file_missing(self, tmp_path):
        with pytest.raises(StagingError, match="Not in download cache"):
            cached_file(tmp_path, "https://example.com/pkg-1.0.tar.gz")

    def test_stage_unpacks_single_top_dir(self, descriptor, cache_dir):
        res = descriptor.get_resource("pyparsing")
        with stage(res.url, res.checksum, cache_dir) as src:
            assert src.name == "pyparsing-2.0.1"
            assert (src / "setup.py").is_file()
            staged = src
        assert not staged.exists()

    def test_stage_rejects_bad_checksum(self, descriptor, cache_dir):
        res = descriptor.get_resource("pyparsing")
        with pytest.raises(StagingError):
            with stage(res.url, "sha1:" + "0" * 40, cache_dir):
                pass

    def test_stage_rejects_corrupt_archive(self, tmp_path):
        bad = tmp_path / "bad-1.0.tar.gz"
        bad.write_bytes(b"not a tarball")
        checksum = "sha1:" + hashlib.sha1(b"not a tarball").hexdigest()
        with pytest.raises(StagingError, match="Extract failed"):
            with stage("https://example.com/bad-1.0.tar.gz", checksum, tmp_path):
                pass
