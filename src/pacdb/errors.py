class LocalDbError(RuntimeError):
    """
    Base class of every error raised while reading the local database.
    """


class EntryReadError(LocalDbError):
    """
    A database file is missing or could not be read.
    """


class ManifestReadError(EntryReadError):
    """
    An mtree file could not be decompressed or decoded as text.
    """


class DescFormatError(LocalDbError):
    pass


class MTreeFormatError(LocalDbError):
    pass


class MissingFieldError(LocalDbError):
    def __init__(self, field: str, path: object = None):
        self.field = field
        location = f" in {path}" if path is not None else ""
        super().__init__(f"Mandatory field %{field}% is missing{location}")


class PackageNotFoundError(LocalDbError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"package '{name}' was not found")
