# pyright: reportUnknownMemberType=false

import gzip
import lzma
import pathlib
import typing

import pytest
import zstandard

from pacdb.localdb import core as localdb_core

if typing.TYPE_CHECKING:
    import pyfakefs.fake_filesystem

LINUX_DESC = """%NAME%
linux

%VERSION%
5.11.6.arch1-1

%BASE%
linux

%DESC%
The Linux kernel and modules

%URL%
https://git.archlinux.org/linux.git/log/?h=v5.11.6-arch1

%ARCH%
x86_64

%BUILDDATE%
1615580945

%INSTALLDATE%
1615912345

%PACKAGER%
Jan Alexander Steffens (heftig) <heftig@archlinux.org>

%SIZE%
89212345

%REASON%
1

%LICENSE%
GPL2

%VALIDATION%
pgp

%DEPENDS%
coreutils
kmod
initramfs

%OPTDEPENDS%
crda: to set the correct wireless channels of your country
linux-firmware: firmware images needed for some devices

%PROVIDES%
VIRTUALBOX-GUEST-MODULES
WIREGUARD-MODULE

"""

LINUX_KO_PATH = "/usr/lib/modules/5.11.6-arch1-1/kernel/arch/x86/crypto/aegis128-aesni.ko.xz"

LINUX_MTREE = f"""#mtree
/set type=file uid=0 gid=0 mode=644
./.BUILDINFO time=1615580945.0 size=4962 md5digest=1b8bbc4e0d64d5d3bb0b6a2fbde3e8ab sha256digest=5c4ea7a8a66a1f6f9a5d6fbd0b3e44f0b6b3d41c6a1d4f6d7b8e2d1d1bf7e9a2
./.PKGINFO time=1615580945.0 size=1120 md5digest=7e2fca3d6c1e1e4d9a0b1c2d3e4f5a6b sha256digest=0a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f60718293a4b5c6d7e8f9
./usr time=1615580945.0 mode=755 type=dir
./usr/lib time=1615580945.0 type=dir
./usr/lib/modules time=1615580945.0 type=dir
.{LINUX_KO_PATH} time=1615580945.0 mode=644 size=21352 md5digest=9f8e7d6c5b4a39281706f5e4d3c2b1a0 sha256digest=f0e1d2c3b4a5968778695a4b3c2d1e0ff0e1d2c3b4a5968778695a4b3c2d1e0f
./usr/lib/modules/5.11.6-arch1-1/vmlinuz time=1615580945.0 size=9453376 md5digest=00112233445566778899aabbccddeeff
"""

VIM_DESC = """%NAME%
vim

%VERSION%
8-1

%ARCH%
x86_64

%DEPENDS%
vim-runtime

"""

VIM_MTREE = """#mtree
/set type=file uid=0 gid=0 mode=644
./usr/bin/vim time=1615000000.0 mode=755 size=3500000
./usr/bin/vimdiff time=1615000000.0 type=link link=vim
"""


def compress(content: str, compression: typing.Literal["gz", "xz", "zst"] = "gz") -> bytes:
    data = content.encode("utf-8")
    match compression:
        case "gz":
            return gzip.compress(data)
        case "xz":
            return lzma.compress(data)
        case "zst":
            return zstandard.ZstdCompressor().compress(data)


class Helpers:
    linux_desc = LINUX_DESC
    linux_mtree = LINUX_MTREE
    linux_ko_path = LINUX_KO_PATH
    vim_desc = VIM_DESC
    vim_mtree = VIM_MTREE

    compress = staticmethod(compress)

    @staticmethod
    def minimal_desc(name: str, version: str = "1.0-1") -> str:
        return f"%NAME%\n{name}\n\n%VERSION%\n{version}\n\n"

    @staticmethod
    def create_entry(
        fs: "pyfakefs.fake_filesystem.FakeFilesystem",
        root: pathlib.Path,
        dir_name: str,
        desc: str | None,
        mtree: str | bytes | None,
        compression: typing.Literal["gz", "xz", "zst"] = "gz",
    ) -> pathlib.Path:
        """
        Creates one entry directory. desc or mtree can be None to leave that file out, and mtree
        can be raw bytes to write an arbitrary (e.g. corrupted) stream.
        """
        entry_dir = root / dir_name
        _ = fs.create_dir(entry_dir)
        if desc is not None:
            _ = fs.create_file(entry_dir / "desc", contents=desc)
        if mtree is not None:
            mtree_bytes = mtree if isinstance(mtree, bytes) else compress(mtree, compression)
            _ = fs.create_file(entry_dir / "mtree", contents=mtree_bytes)
        return entry_dir


@pytest.fixture(name="helpers")
def helpers_fixture() -> Helpers:
    return Helpers()


@pytest.fixture(name="local_db_root")
def local_db_root_fixture(fs: "pyfakefs.fake_filesystem.FakeFilesystem") -> pathlib.Path:
    """
    A local database with linux and vim installed, plus a directory that is not an entry.
    """
    root = pathlib.Path("/var/lib/pacman/local")
    Helpers.create_entry(fs, root, "linux-5.11.6.arch1-1", LINUX_DESC, LINUX_MTREE)
    Helpers.create_entry(fs, root, "vim-8-1", VIM_DESC, VIM_MTREE)
    _ = fs.create_file(root / "ALPM_DB_VERSION", contents="9\n")
    return root


@pytest.fixture(name="local_db")
def local_db_fixture(local_db_root: pathlib.Path) -> localdb_core.LocalDatabase:
    return localdb_core.LocalDatabase(local_db_root)
