import pathlib
import typing

import typer

from pacdb import common, errors
from pacdb.localdb import core as localdb_core

DbPathOption = typing.Annotated[
    pathlib.Path,
    typer.Option("--dbpath", envvar="PACDB_DBPATH", help="Local database directory"),
]


def _lookup_or_exit(db: localdb_core.LocalDatabase, name: str) -> localdb_core.LocalDbEntry:
    try:
        return db.lookup(name)
    except errors.LocalDbError as e:
        common.logging.error("error: %s", e)
        raise typer.Exit(code=1) from e


def query(
    names: typing.Annotated[list[str] | None, typer.Argument()] = None,
    owns: typing.Annotated[
        str | None, typer.Option("--owns", "-o", help="Find the package owning a file")
    ] = None,
    list_files: typing.Annotated[
        str | None, typer.Option("--list", "-l", help="List the files owned by a package")
    ] = None,
    dbpath: DbPathOption = common.constants.local_db_dir,
):
    """
    Query the packages installed in the local database.
    """
    db = localdb_core.LocalDatabase(dbpath)

    if owns is not None:
        db.populate()
        owner = db.owner_of(owns)
        if owner is None:
            common.logging.error("error: No package owns %s", owns)
            raise typer.Exit(code=1)
        print(f"{owns} is owned by {owner.name} {owner.version}")
        return

    if list_files is not None:
        entry = _lookup_or_exit(db, list_files)
        for path in entry.paths():
            print(f"{entry.name} {path}")
        return

    if not names:
        db.populate()
        for name in sorted(db):
            entry = db.lookup(name)
            print(f"{entry.name} {entry.version}")
        return

    failed = False
    for name in names:
        try:
            entry = db.lookup(name)
        except errors.PackageNotFoundError as e:
            common.logging.error("error: %s", e)
            failed = True
            continue
        print(f"{entry.name} {entry.version}")

    if failed:
        raise typer.Exit(code=1)


def info(
    name: str,
    dbpath: DbPathOption = common.constants.local_db_dir,
):
    """
    Print the desc of an installed package as JSON.
    """
    db = localdb_core.LocalDatabase(dbpath)
    entry = _lookup_or_exit(db, name)
    print(entry.desc.model_dump_json(indent=2))
