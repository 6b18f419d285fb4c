import pathlib

from pacdb import errors

# The files file may carry a %BACKUP% section after the file list
_section_prefix = "%"


def parse_files(files: str) -> list[str]:
    """
    Returns the absolute paths listed in the content of a files file.
    """
    paths: list[str] = []
    # First line is the %FILES% header
    for line in files.strip().splitlines()[1:]:
        line = line.strip()
        if len(line) == 0:
            continue
        if line.startswith(_section_prefix):
            break
        paths.append(f"/{line}")
    return paths


def read_files_from_file(path: pathlib.Path) -> list[str]:
    """
    Reads the files file of a package.

    The same paths are available with their attributes from the mtree, so this is only useful
    when ownership alone is needed.
    """
    try:
        files = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise errors.EntryReadError(f"Failed to read {path}: {e}") from e

    return parse_files(files)
