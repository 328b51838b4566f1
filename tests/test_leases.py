import pytest

from propman.core.leases import build_lease, decode_data_uri, encode_data_uri

def test_data_uri_carries_content_type_and_bytes():
    uri = encode_data_uri(b"\x00\x01binary", "application/msword")
    assert uri.startswith("data:application/msword;base64,")
    assert decode_data_uri(uri) == ("application/msword", b"\x00\x01binary")

def test_decode_rejects_non_base64_uris():
    with pytest.raises(ValueError):
        decode_data_uri("https://example.com/lease.pdf")
    with pytest.raises(ValueError):
        decode_data_uri("data:text/plain,hello")
    with pytest.raises(ValueError):
        decode_data_uri("data:application/pdf;base64,@@@")

def test_build_lease_guesses_type_from_name():
    lease = build_lease("Lease 2024.pdf", b"%PDF-1.4")
    assert lease.id.startswith("lease-")
    assert lease.file_size == 8
    assert lease.file_data.startswith("data:application/pdf;base64,")
    assert lease.uploaded_at.tzinfo is not None
