"""Tests for the filesystem document bucket."""

from datetime import datetime, timezone

import pytest

from kinchart.services.storage import (
    DocumentStorage,
    StorageError,
    build_object_path,
    file_extension,
    title_from_filename,
)

NOW = datetime(2025, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


@pytest.fixture
def bucket(tmp_path) -> DocumentStorage:
    return DocumentStorage(root=tmp_path, public_base_url="https://files.example/", signing_secret="s3cret")


class TestPathHelpers:
    def test_file_extension_lowercased(self):
        assert file_extension("Scan.JPEG") == "jpeg"
        assert file_extension("report.final.pdf") == "pdf"

    def test_file_extension_missing(self):
        assert file_extension("photo") is None
        assert file_extension("trailingdot.") is None

    def test_title_from_filename(self):
        assert title_from_filename("blood_test-2024.pdf") == "blood test 2024"
        assert title_from_filename("photo") == "photo"
        assert title_from_filename(".hidden") == ".hidden"

    def test_object_path_uses_epoch_millis(self):
        expected_ms = 1735787045678
        assert build_object_path("m1", "x.PDF", NOW) == f"m1/{expected_ms}.pdf"
        assert build_object_path("m1", "noext", NOW) == f"m1/{expected_ms}.jpg"


class TestDocumentStorage:
    @pytest.mark.asyncio
    async def test_upload_download_remove(self, bucket):
        await bucket.upload("m1/1.pdf", b"data", content_type="application/pdf")
        assert bucket.exists("m1/1.pdf")
        assert await bucket.download("m1/1.pdf") == b"data"

        await bucket.remove(["m1/1.pdf", "m1/missing.pdf"])
        assert not bucket.exists("m1/1.pdf")

    @pytest.mark.asyncio
    async def test_upload_never_overwrites_without_upsert(self, bucket):
        await bucket.upload("m1/1.pdf", b"first")
        with pytest.raises(StorageError):
            await bucket.upload("m1/1.pdf", b"second")

        await bucket.upload("m1/1.pdf", b"second", upsert=True)
        assert await bucket.download("m1/1.pdf") == b"second"

    @pytest.mark.asyncio
    async def test_download_missing_raises(self, bucket):
        with pytest.raises(StorageError):
            await bucket.download("m1/nothing.pdf")

    @pytest.mark.parametrize("path", ["../escape.pdf", "/etc/passwd", "m1/../../x", ""])
    def test_rejects_paths_outside_bucket(self, bucket, path):
        with pytest.raises(StorageError):
            bucket.exists(path)

    @pytest.mark.asyncio
    async def test_allocate_path_skips_taken_millisecond(self, bucket):
        first = bucket.allocate_path("m1", "a.pdf", NOW)
        await bucket.upload(first, b"a")

        second = bucket.allocate_path("m1", "b.pdf", NOW)

        assert second != first
        assert second == build_object_path("m1", "b.pdf", NOW.replace(microsecond=679000))

    def test_public_url_and_path_round_trip(self, bucket):
        url = bucket.get_public_url("m1/1.pdf")
        assert url == "https://files.example/storage/documents/m1/1.pdf"
        assert bucket.path_from_url(url) == "m1/1.pdf"
        assert bucket.path_from_url("https://elsewhere.example/x") is None

    def test_signed_url_verifies_until_expiry(self, bucket):
        url, expires = bucket.create_signed_url("m1/1.pdf", 3600, now=1_000_000)
        assert expires == 1_003_600
        assert url.startswith("https://files.example/storage/documents/m1/1.pdf?expires=1003600&signature=")
        signature = url.rsplit("signature=", 1)[1]

        assert bucket.verify_signature("m1/1.pdf", expires, signature, now=1_003_600)
        assert not bucket.verify_signature("m1/1.pdf", expires, signature, now=1_003_601)
        assert not bucket.verify_signature("m1/2.pdf", expires, signature, now=1_000_000)
        assert not bucket.verify_signature("m1/1.pdf", expires + 1, signature, now=1_000_000)

    def test_signature_depends_on_secret(self, tmp_path, bucket):
        other = DocumentStorage(root=tmp_path, public_base_url="https://files.example", signing_secret="other")
        url, expires = bucket.create_signed_url("m1/1.pdf", 60, now=0)
        signature = url.rsplit("signature=", 1)[1]
        assert not other.verify_signature("m1/1.pdf", expires, signature, now=0)
