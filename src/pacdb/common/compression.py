import gzip
import lzma
import typing
import zlib

import zstandard

CompressionType = typing.Literal["gz", "xz", "zst"]

_magic_numbers: dict[bytes, CompressionType] = {
    b"\x1f\x8b": "gz",
    b"\xfd7zXZ\x00": "xz",
    b"\x28\xb5\x2f\xfd": "zst",
}


class DecompressionError(RuntimeError):
    pass


def detect_compression(data: bytes) -> CompressionType:
    """
    Guess the compression method of a stream from its magic number.
    Pacman writes gzip, so anything unrecognized is treated as gzip.
    """
    for magic, compression_type in _magic_numbers.items():
        if data.startswith(magic):
            return compression_type
    return "gz"


def _zstd_decompress(data: bytes) -> bytes:
    # Frames written in streaming mode carry no content size, so
    # ZstdDecompressor.decompress can't be used directly
    dobj = zstandard.ZstdDecompressor().decompressobj()
    result = dobj.decompress(data)
    if not dobj.eof:
        raise DecompressionError("zstd stream ended before the end of its frame")
    return result


def decompress(data: bytes) -> bytes:
    """
    Fully decompresses a gzip, xz or zstd stream held in memory.
    """
    compression_type = detect_compression(data)
    try:
        match compression_type:
            case "gz":
                return gzip.decompress(data)
            case "xz":
                return lzma.decompress(data)
            case "zst":
                return _zstd_decompress(data)
    except (OSError, EOFError, zlib.error, lzma.LZMAError, zstandard.ZstdError) as e:
        raise DecompressionError(f"Corrupted {compression_type} stream: {e}") from e
