import enum

import pydantic


class FileType(enum.Enum):
    DIRECTORY = "dir"
    FILE = "file"
    SYMBOLIC_LINK = "link"
    UNKNOWN = "unknown"


class Hashes(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    md5: str | None = None
    sha256: str | None = None


class MTreeEntry(pydantic.BaseModel):
    """
    A file owned by an installed package, as recorded in its mtree file
    """

    model_config = pydantic.ConfigDict(frozen=True)

    path: str
    hashes: Hashes = Hashes()

    # Octal digits as written in the mtree, e.g. 755
    mode: int = 0
    gid: int = 0
    uid: int = 0

    # Seconds since epoch, fractional part dropped
    time: int = 0
    size: int = 0
    file_type: FileType = FileType.UNKNOWN
    link: str | None = None

    @pydantic.field_validator("path")
    @classmethod
    def _validate_path(cls, path: str) -> str:
        if not path.startswith("/"):
            raise ValueError(f"{path} is not an absolute path")
        return path

    @property
    def permissions(self) -> int:
        """
        Permission bits, e.g. 0o755 for a mode written as 755.
        """
        return int(str(self.mode), 8)
