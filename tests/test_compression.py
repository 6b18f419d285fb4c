import pytest

from pacdb.common import compression


@pytest.mark.parametrize("compression_type", ["gz", "xz", "zst"])
def test_detect_compression(helpers, compression_type):
    data = helpers.compress("./usr/bin/foo\n", compression_type)
    assert compression.detect_compression(data) == compression_type


def test_unknown_magic_is_gzip():
    assert compression.detect_compression(b"plain text") == "gz"


@pytest.mark.parametrize("compression_type", ["gz", "xz", "zst"])
def test_decompress(helpers, compression_type):
    data = helpers.compress("./usr/bin/foo\n", compression_type)
    assert compression.decompress(data) == b"./usr/bin/foo\n"


@pytest.mark.parametrize("data", [b"plain text", b"\xfd7zXZ\x00garbage"])
def test_decompress_invalid(data):
    with pytest.raises(compression.DecompressionError):
        compression.decompress(data)
