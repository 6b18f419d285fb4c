import enum
import typing

import pydantic


class Arch(enum.Enum):
    ANY = "any"
    X86_64 = "x86_64"


class Validation(enum.Enum):
    NONE = "none"
    PGP = "pgp"


class Packager(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    email: str | None = None


class OptionalDependency(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(frozen=True)

    package: str
    reason: str | None = None


NonEmptyStr = typing.Annotated[str, pydantic.StringConstraints(min_length=1)]


class PackageDescription(pydantic.BaseModel):
    """
    Contents of the desc file of an installed package
    """

    model_config = pydantic.ConfigDict(frozen=True)

    name: NonEmptyStr
    version: NonEmptyStr
    pkgbase: str | None = None
    description: str | None = None
    url: str | None = None
    arch: Arch | None = None

    # Seconds since epoch
    build_date: int | None = None
    install_date: int | None = None

    packager: Packager | None = None

    # Installed size in bytes
    size: int | None = None

    # Always observed as 1, meaning unknown
    reason: int | None = None

    licenses: tuple[str, ...] = ()
    validation: Validation | None = None
    replaces: tuple[str, ...] = ()
    depends: tuple[str, ...] = ()
    optdepends: tuple[OptionalDependency, ...] = ()
    provides: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()
