__all__ = ["core", "desc", "files", "mtree", "LocalDatabase", "LocalDbEntry"]

import pacdb.localdb.core as core
import pacdb.localdb.desc as desc
import pacdb.localdb.files as files
import pacdb.localdb.mtree as mtree
from pacdb.localdb.core import LocalDatabase, LocalDbEntry
