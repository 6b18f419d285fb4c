import collections.abc
import pathlib
import re
import typing

from pacdb import errors
from pacdb.common import constants
from pacdb.models import desc as desc_models

_label_regex = re.compile(r"^%(\w+)%$")
_email_regex = re.compile(
    r"[a-z0-9_+]([a-z0-9_+.]*[a-z0-9_+])?@[a-z0-9]+([\-.][a-z0-9]+)*\.[a-z]{2,6}\b",
    re.IGNORECASE,
)

# makepkg's default is "Unknown Packager", but a misspelled variant has been seen in the wild
_no_packager_sentinels = {"unknown packager", "unknown pacakger"}


def _split_sections(desc: str) -> collections.abc.Generator[tuple[str, list[str]]]:
    """
    Splits desc content into (label, value lines) pairs, in file order.
    """
    label: str | None = None
    values: list[str] = []

    for line in desc.splitlines():
        stripped = line.strip()

        label_match = _label_regex.match(stripped)
        if label_match is not None:
            if label is not None:
                yield label, values
            label = label_match.group(1)
            values = []
            continue

        # Sections are separated by empty lines
        if len(stripped) == 0:
            continue

        if label is None:
            raise errors.DescFormatError(f"Unexpected line before the first section: '{line}'")
        values.append(stripped)

    if label is not None:
        yield label, values


def _parse_unsigned(value: str, max_value: int | None = None) -> int | None:
    """
    Integers that fail to parse are treated as absent rather than as errors.
    """
    if not value.isdecimal():
        return None
    result = int(value)
    if max_value is not None and result > max_value:
        return None
    return result


def _parse_packager(value: str) -> desc_models.Packager | None:
    if value.lower() in _no_packager_sentinels:
        return None

    name = value.split("<", 1)[0].strip()
    email_match = _email_regex.search(value)
    return desc_models.Packager(
        name=name, email=email_match.group(0) if email_match is not None else None
    )


def _parse_optdepend(line: str) -> desc_models.OptionalDependency:
    package, _, reason = line.partition(":")
    package = package.strip()
    reason = reason.strip()
    if len(package) == 0:
        raise errors.DescFormatError(f"Optional dependency without a package name: '{line}'")
    return desc_models.OptionalDependency(package=package, reason=reason if reason else None)


def parse_desc(desc: str) -> desc_models.PackageDescription:
    """
    Parses the content of a desc file of the local database.
    """
    fields: dict[str, typing.Any] = {}

    for label, values in _split_sections(desc):
        if len(values) == 0:
            continue
        value = "\n".join(values)

        match label:
            case "NAME":
                fields["name"] = value
            case "VERSION":
                fields["version"] = value
            case "BASE":
                fields["pkgbase"] = value
            case "DESC":
                fields["description"] = value
            case "URL":
                fields["url"] = value
            case "ARCH":
                try:
                    fields["arch"] = desc_models.Arch(value)
                except ValueError:
                    raise errors.DescFormatError(f"Unexpected architecture: '{value}'") from None
            case "BUILDDATE":
                fields["build_date"] = _parse_unsigned(value)
            case "INSTALLDATE":
                fields["install_date"] = _parse_unsigned(value)
            case "PACKAGER":
                fields["packager"] = _parse_packager(value)
            case "SIZE":
                fields["size"] = _parse_unsigned(value)
            case "REASON":
                fields["reason"] = _parse_unsigned(value, max_value=255)
            case "LICENSE":
                fields["licenses"] = values
            case "VALIDATION":
                try:
                    fields["validation"] = desc_models.Validation(value)
                except ValueError:
                    raise errors.DescFormatError(f"Unexpected validation type: '{value}'") from None
            case "REPLACES":
                fields["replaces"] = values
            case "DEPENDS":
                fields["depends"] = values
            case "OPTDEPENDS":
                fields["optdepends"] = [_parse_optdepend(line) for line in values]
            case "PROVIDES":
                fields["provides"] = values
            case "GROUPS":
                fields["groups"] = values
            case "CONFLICTS":
                fields["conflicts"] = values
            case _:
                pkg_name = fields.get("name", constants.unknown_pkg_name)
                raise errors.DescFormatError(f"Unknown desc section '{label}' in {pkg_name}")

    for mandatory_field in ("name", "version"):
        if mandatory_field not in fields:
            raise errors.MissingFieldError(mandatory_field.upper())

    return desc_models.PackageDescription.model_validate(fields)


def read_desc_from_file(path: pathlib.Path) -> desc_models.PackageDescription:
    """
    Reads and parses a desc file.
    """
    try:
        desc = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise errors.EntryReadError(f"Failed to read {path}: {e}") from e

    return parse_desc(desc)
