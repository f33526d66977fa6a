"""Tests for buckets and single-object operations."""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone

import pytest

from qiniu_client.core.enums import StorageType
from qiniu_client.core.exceptions import CallerInputError, ResourceNotFoundError
from qiniu_client.core.zone import Zone
from qiniu_client.services.storage import Bucket, ListedEntry, encode_entry

from .conftest import FakeTransport


def list_page(keys: list[str], marker: str = "") -> dict:
    return {
        "marker": marker,
        "items": [
            {
                "key": key,
                "fsize": 16384,
                "hash": f"hash-{key}",
                "mimeType": "application/octet-stream",
                "putTime": 15_000_000_000_000_000,
                "type": 1,
                "status": 0,
            }
            for key in keys
        ],
    }


class TestBucketFiles:
    """Tests for bucket listings."""

    @pytest.mark.asyncio
    async def test_lists_entries(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test that raw items become listed entries."""
        transport.responses = [list_page(["4k", "16k"], "m1"), list_page(["1m"])]

        entries = [entry async for entry in bucket.files(prefix="k")]

        assert [entry.key for entry in entries] == ["4k", "16k", "1m"]
        first = entries[0]
        assert isinstance(first, ListedEntry)
        assert first.bucket == "test-bucket"
        assert first.file_size == 16384
        assert first.storage_type == StorageType.INFREQUENT
        assert first.created_at == datetime(2017, 7, 14, 2, 40, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_list_request_shape(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test endpoint, fixed params and page size of list requests."""
        transport.responses = [list_page([])]

        assert [entry async for entry in bucket.files(prefix="photos/", limit=5)] == []

        call = transport.calls[0]
        assert call.method == "POST"
        assert call.base_url == "http://rsf.qiniu.com"
        assert call.path == "/list"
        assert call.params == {"bucket": "test-bucket", "prefix": "photos/", "limit": 5}

    @pytest.mark.asyncio
    async def test_https_endpoint(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test scheme override on listing."""
        transport.responses = [list_page([])]

        [entry async for entry in bucket.files(https=True)]

        assert transport.calls[0].base_url == "https://rsf.qbox.me"

    @pytest.mark.asyncio
    async def test_newer_and_unknown_storage_classes(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test that listing survives storage classes beyond the basic three."""
        raw = list_page(["deep", "future"])
        raw["items"][0]["type"] = 3
        raw["items"][1]["type"] = 99
        raw["items"][1]["status"] = 7
        transport.responses = [raw]

        entries = [entry async for entry in bucket.files()]

        assert [entry.key for entry in entries] == ["deep", "future"]
        assert entries[0].storage_type is StorageType.DEEP_ARCHIVE
        assert entries[1].storage_type == 99
        assert entries[1].status == 7


class TestEntryOperations:
    """Tests for single-object operations."""

    @pytest.mark.asyncio
    async def test_stat(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test metadata parsing."""
        transport.responses = [{"fsize": 4096, "hash": "h", "mimeType": "text/plain", "type": 0, "status": 1}]

        stat = await bucket.entry("4k").stat()

        assert stat.file_size == 4096
        assert stat.is_normal_storage
        assert stat.is_disabled
        call = transport.calls[0]
        assert call.base_url == "http://rs.qiniu.com"
        assert call.path == f"/stat/{encode_entry('test-bucket', '4k')}"

    @pytest.mark.asyncio
    async def test_stat_intelligent_tiering(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test metadata parsing for intelligent tiering objects."""
        transport.responses = [{"fsize": 1, "hash": "h", "mimeType": "text/plain", "type": 5}]

        stat = await bucket.entry("smart").stat()

        assert stat.storage_type is StorageType.INTELLIGENT_TIERING
        assert not stat.is_normal_storage

    @pytest.mark.asyncio
    async def test_change_to_deep_archive(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test switching to a newer storage class."""
        await bucket.entry("a").change_storage_type(StorageType.DEEP_ARCHIVE)

        assert transport.calls[0].path == f"/chtype/{encode_entry('test-bucket', 'a')}/type/3"

    @pytest.mark.asyncio
    async def test_copy_returns_destination(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test copy command and destination handle."""
        entry = await bucket.entry("a").copy_to("other", "b", force=True)

        assert entry.bucket.name == "other"
        assert entry.key == "b"
        assert transport.calls[0].path == (
            f"/copy/{encode_entry('test-bucket', 'a')}/{encode_entry('other', 'b')}/force/true"
        )

    @pytest.mark.asyncio
    async def test_rename_stays_in_bucket(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test that rename is a move within the same bucket."""
        entry = await bucket.entry("a").rename_to("b")

        assert entry.bucket is bucket
        assert transport.calls[0].path == (
            f"/move/{encode_entry('test-bucket', 'a')}/{encode_entry('test-bucket', 'b')}/force/false"
        )

    @pytest.mark.asyncio
    async def test_status_and_type_commands(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test disable, enable, storage type and MIME type commands."""
        entry = bucket.entry("a")
        encoded = encode_entry("test-bucket", "a")

        await entry.disable()
        await entry.enable()
        await entry.infrequent_storage()
        await entry.change_mime_type("application/json")
        await entry.delete_after_days(3)

        assert [call.path for call in transport.calls] == [
            f"/chstatus/{encoded}/status/1",
            f"/chstatus/{encoded}/status/0",
            f"/chtype/{encoded}/type/1",
            f"/chgm/{encoded}/mime/{base64.urlsafe_b64encode(b'application/json').decode()}",
            f"/deleteAfterDays/{encoded}/3",
        ]

    @pytest.mark.asyncio
    async def test_try_delete_missing(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test that deleting a missing object reports False."""
        transport.responses = [ResourceNotFoundError("no such file or directory", 612)]

        assert await bucket.entry("missing").try_delete() is False

    @pytest.mark.asyncio
    async def test_try_delete_existing(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test that deleting an existing object reports True."""
        assert await bucket.entry("a").try_delete() is True
        assert transport.calls[0].path == f"/delete/{encode_entry('test-bucket', 'a')}"

    def test_empty_key(self, bucket: Bucket) -> None:
        """Test that entries need a key."""
        with pytest.raises(CallerInputError):
            bucket.entry("")


class TestBucketManagement:
    """Tests for bucket configuration calls."""

    @pytest.mark.asyncio
    async def test_domains(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test domain listing."""
        transport.responses = [["cdn.example.com", "img.example.com"]]

        assert await bucket.domains() == ["cdn.example.com", "img.example.com"]
        assert transport.calls[0].base_url == "http://api.qiniu.com"
        assert transport.calls[0].params == {"tbl": "test-bucket"}

    @pytest.mark.asyncio
    async def test_acl(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test switching between private and public."""
        transport.responses = [None, {"private": 1}]

        await bucket.make_private()
        assert await bucket.is_private() is True

        assert transport.calls[0].base_url == "http://uc.qbox.me"
        assert transport.calls[0].params == {"bucket": "test-bucket", "private": 1}

    @pytest.mark.asyncio
    async def test_image(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test mirror source configuration."""
        transport.responses = [None, {"source": "http://www.example.com", "host": "origin.example.com"}]

        await bucket.set_image("http://www.example.com", source_host="origin.example.com")
        image = await bucket.image()

        encoded_url = base64.urlsafe_b64encode(b"http://www.example.com").decode()
        encoded_host = base64.urlsafe_b64encode(b"origin.example.com").decode()
        assert transport.calls[0].path == f"/image/test-bucket/from/{encoded_url}/host/{encoded_host}"
        assert image is not None
        assert image.source_host == "origin.example.com"

    @pytest.mark.asyncio
    async def test_no_image(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test buckets without a mirror source."""
        transport.responses = [{}]

        assert await bucket.image() is None

    @pytest.mark.asyncio
    async def test_index_page(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test index page toggling."""
        transport.responses = [None, {"no_index_page": 1}]

        await bucket.disable_index_page()

        assert await bucket.has_index_page() is False
        assert transport.calls[0].params == {"bucket": "test-bucket", "noIndexPage": 1}

    @pytest.mark.asyncio
    async def test_drop(self, bucket: Bucket, transport: FakeTransport) -> None:
        """Test dropping the bucket."""
        await bucket.drop()

        assert transport.calls[0].path == "/drop/test-bucket"

    def test_zone_endpoints(self, bucket: Bucket) -> None:
        """Test that endpoints follow the bucket's zone."""
        bucket.zone = Zone.huabei()

        assert bucket.endpoint("rs", True) == "https://rs-z1.qbox.me"

    def test_upload_token_scope(self, bucket: Bucket) -> None:
        """Test that bucket upload tokens embed the key scope."""
        token = bucket.entry("a.txt").upload_token()
        encoded = token.split(":")[2]
        policy = json.loads(base64.urlsafe_b64decode(encoded))

        assert policy["scope"] == "test-bucket:a.txt"
        assert policy["deadline"] == 1_700_000_000 + 3600
