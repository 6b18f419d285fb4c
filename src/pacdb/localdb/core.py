import collections.abc
import os
import pathlib
import types

import pydantic

from pacdb import common, errors
from pacdb.localdb import desc as localdb_desc
from pacdb.localdb import mtree as localdb_mtree
from pacdb.models import desc as desc_models
from pacdb.models import mtree as mtree_models


class LocalDbEntry(pydantic.BaseModel):
    """
    An installed package: its desc together with the files recorded in its mtree.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    desc: desc_models.PackageDescription
    files: tuple[mtree_models.MTreeEntry, ...]

    @property
    def name(self) -> str:
        return self.desc.name

    @property
    def version(self) -> str:
        return self.desc.version

    def paths(self) -> collections.abc.Generator[str]:
        """
        Paths of every file owned by the package, in mtree order.
        """
        for file in self.files:
            yield file.path

    def owns(self, path: str | os.PathLike[str]) -> bool:
        """
        Whether the package owns exactly the given path.
        """
        path_str = os.fspath(path)
        return any(owned == path_str for owned in self.paths())

    @classmethod
    def from_directory(
        cls, entry_dir: pathlib.Path, desc: desc_models.PackageDescription | None = None
    ) -> "LocalDbEntry":
        """
        Reads an entry from a directory of the local database, e.g.
        /var/lib/pacman/local/linux-5.11.6.arch1-1. The directory must contain both a desc and
        an mtree file. An already parsed desc can be passed in to avoid reading it twice.
        """
        if desc is None:
            desc = localdb_desc.read_desc_from_file(entry_dir / common.constants.desc_file_name)
        files = localdb_mtree.read_mtree_from_file(entry_dir / common.constants.mtree_file_name)
        return cls(desc=desc, files=files)


def is_entry_dir(path: pathlib.Path) -> bool:
    """
    Directories only count as database entries if they have both a desc and an mtree.
    """
    return (
        path.is_dir()
        and (path / common.constants.desc_file_name).is_file()
        and (path / common.constants.mtree_file_name).is_file()
    )


class LocalDatabase:
    """
    Cache of the entries of a local database directory, keyed by package name.

    Entries are only read from disk on lookup() or populate(), and once cached they are never
    replaced. Instances are not meant to be shared between threads while they are being
    populated; use snapshot() to hand a read-only view to other threads.
    """

    def __init__(self, root: pathlib.Path):
        self.root = root
        self._entries: dict[str, LocalDbEntry] = {}

    def _entry_dirs(self) -> list[pathlib.Path]:
        """
        Valid entry directories under the root, sorted by directory name.
        """
        common.logging.debug("Scanning %s", self.root)
        try:
            children = sorted(self.root.iterdir())
        except OSError as e:
            raise errors.EntryReadError(f"Failed to list {self.root}: {e}") from e
        return [child for child in children if is_entry_dir(child)]

    def _insert(self, entry: LocalDbEntry) -> LocalDbEntry:
        # An entry already cached under this name wins
        return self._entries.setdefault(entry.name, entry)

    def lookup(self, name: str) -> LocalDbEntry:
        """
        Returns the entry of the named package, reading it from disk if it isn't cached yet.

        Errors while reading the package's own directory are raised to the caller. A broken
        desc in a directory that merely shares the prefix (foo-0ad-2.0-1 when looking up foo)
        is skipped with a warning.
        """
        cached = self._entries.get(name)
        if cached is not None:
            common.logging.debug("Cache hit for %s", name)
            return cached

        # Directories are named <name>-<pkgver>-<pkgrel>, but a name may itself contain dashes,
        # so the prefix only narrows down the candidates
        prefix = f"{name}-"
        for entry_dir in self._entry_dirs():
            if not entry_dir.name.startswith(prefix):
                continue

            # pkgver and pkgrel never contain dashes
            own_dir = entry_dir.name.removeprefix(prefix).count("-") == 1
            try:
                desc = localdb_desc.read_desc_from_file(
                    entry_dir / common.constants.desc_file_name
                )
            except errors.LocalDbError as e:
                if own_dir:
                    raise
                common.logging.warning("Skipping %s: %s", entry_dir.name, e)
                continue

            if desc.name != name:
                common.logging.debug("%s belongs to %s, not %s", entry_dir, desc.name, name)
                continue

            common.logging.debug("Reading %s from %s", name, entry_dir)
            return self._insert(LocalDbEntry.from_directory(entry_dir, desc))

        raise errors.PackageNotFoundError(name)

    def populate(self, query: str = "") -> list[str]:
        """
        Reads every entry whose directory name contains query into the cache. An empty query
        loads the whole database. Entries that fail to parse are skipped with a warning.

        Returns the names of the matching packages, in directory order.
        """
        names: list[str] = []
        for entry_dir in self._entry_dirs():
            if query not in entry_dir.name:
                continue

            try:
                desc = localdb_desc.read_desc_from_file(
                    entry_dir / common.constants.desc_file_name
                )
                if desc.name not in self._entries:
                    self._insert(LocalDbEntry.from_directory(entry_dir, desc))
            except errors.LocalDbError as e:
                common.logging.warning("Skipping %s: %s", entry_dir.name, e)
                continue

            names.append(desc.name)

        common.logging.debug("Populated %d entries matching '%s'", len(names), query)
        return names

    def list_names(self) -> list[str]:
        """
        Names of all packages in the database. Only desc files are read, so this is much
        cheaper than populate().
        """
        names: list[str] = []
        for entry_dir in self._entry_dirs():
            try:
                desc = localdb_desc.read_desc_from_file(
                    entry_dir / common.constants.desc_file_name
                )
            except errors.LocalDbError as e:
                common.logging.warning("Skipping %s: %s", entry_dir.name, e)
                continue
            names.append(desc.name)
        return sorted(names)

    @staticmethod
    def owns(entry: LocalDbEntry, path: str | os.PathLike[str]) -> bool:
        return entry.owns(path)

    def owner_of(self, path: str | os.PathLike[str]) -> LocalDbEntry | None:
        """
        Finds the cached entry owning a path. Only already cached entries are searched.
        """
        for entry in self._entries.values():
            if entry.owns(path):
                return entry
        return None

    def get(self, name: str) -> LocalDbEntry | None:
        return self._entries.get(name)

    def snapshot(self) -> collections.abc.Mapping[str, LocalDbEntry]:
        """
        Read-only copy of the cache as it is now.
        """
        return types.MappingProxyType(dict(self._entries))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> collections.abc.Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
