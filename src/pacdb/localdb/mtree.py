import pathlib
import re

from pacdb import common, errors
from pacdb.models import mtree as mtree_models

_escape_run_regex = re.compile(r"(?:\\[0-7]{3})+")


def _unescape(value: str) -> str:
    """
    Undoes the octal escaping mtree applies to special characters, e.g. \\040 for a space.
    Consecutive escapes are decoded together as they may form a multibyte UTF-8 character.
    """

    def decode_run(run: re.Match[str]) -> str:
        escaped = run.group(0)
        raw = bytes(int(escaped[i + 1 : i + 4], 8) for i in range(0, len(escaped), 4))
        return raw.decode("utf-8", errors="replace")

    return _escape_run_regex.sub(decode_run, value)


def _normalize_path(path: str) -> str:
    """
    mtree paths are relative to the root of the package, e.g. ./usr/bin/bash.
    """
    if path == ".":
        return "/"
    if path.startswith("./"):
        return path[1:]
    if not path.startswith("/"):
        return f"/{path}"
    return path


def _parse_int(key: str, value: str, line: str) -> int:
    # Only plain unsigned digits, int() would also take signs and underscores
    if not value.isdecimal():
        raise errors.MTreeFormatError(f"Invalid {key} '{value}' in mtree line '{line}'")
    return int(value)


def _parse_file_type(value: str, line: str) -> mtree_models.FileType:
    match value:
        case "file":
            return mtree_models.FileType.FILE
        case "dir":
            return mtree_models.FileType.DIRECTORY
        case "link":
            return mtree_models.FileType.SYMBOLIC_LINK
    raise errors.MTreeFormatError(f"Unknown file type '{value}' in mtree line '{line}'")


def parse_mtree(mtree: str) -> list[mtree_models.MTreeEntry]:
    """
    Parses the decompressed content of an mtree file.

    mode, gid, uid and size are inherited from the previous line (or a /set directive) until
    a line overrides them. Everything else has to be given on the line it applies to.
    """
    entries: list[mtree_models.MTreeEntry] = []

    mode = 0
    gid = 0
    uid = 0
    size = 0

    for line in mtree.splitlines():
        tokens = line.split()
        if len(tokens) == 0 or tokens[0] == "/unset" or tokens[0].startswith("#"):
            continue

        path: str | None = None
        md5: str | None = None
        sha256: str | None = None
        time = 0
        file_type = mtree_models.FileType.UNKNOWN
        link: str | None = None

        for token in tokens:
            key, separator, value = token.partition("=")
            if separator == "":
                if token.startswith("/set"):
                    continue
                path = _normalize_path(_unescape(token))
                continue

            match key:
                case "mode":
                    mode = _parse_int(key, value, line)
                case "gid":
                    gid = _parse_int(key, value, line)
                case "uid":
                    uid = _parse_int(key, value, line)
                case "size":
                    size = _parse_int(key, value, line)
                case "time":
                    try:
                        time = int(float(value))
                    except (ValueError, OverflowError):
                        raise errors.MTreeFormatError(
                            f"Invalid time '{value}' in mtree line '{line}'"
                        ) from None
                case "type":
                    file_type = _parse_file_type(value, line)
                case "link":
                    link = _unescape(value)
                case _ if key.endswith("digest"):
                    match key.removesuffix("digest"):
                        case "md5":
                            md5 = value
                        case "sha256":
                            sha256 = value
                        case hash_type:
                            raise errors.MTreeFormatError(
                                f"Unknown hash type '{hash_type}' in mtree line '{line}'"
                            )
                case _:
                    raise errors.MTreeFormatError(f"Unknown mtree keyword '{key}' in '{line}'")

        # Lines with only directives don't describe a file
        if path is None:
            continue

        entries.append(
            mtree_models.MTreeEntry(
                path=path,
                hashes=mtree_models.Hashes(md5=md5, sha256=sha256),
                mode=mode,
                gid=gid,
                uid=uid,
                time=time,
                size=size,
                file_type=file_type,
                link=link,
            )
        )

    return entries


def read_mtree_from_bytes(data: bytes) -> list[mtree_models.MTreeEntry]:
    """
    Decompresses and parses an mtree file held in memory.
    """
    try:
        mtree = common.compression.decompress(data).decode("utf-8")
    except (common.compression.DecompressionError, UnicodeDecodeError) as e:
        raise errors.ManifestReadError(f"Failed to decode mtree: {e}") from e

    return parse_mtree(mtree)


def read_mtree_from_file(path: pathlib.Path) -> list[mtree_models.MTreeEntry]:
    """
    Reads, decompresses and parses an mtree file.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise errors.EntryReadError(f"Failed to read {path}: {e}") from e

    return read_mtree_from_bytes(data)
