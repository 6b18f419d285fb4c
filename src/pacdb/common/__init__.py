__all__ = [
    "compression",
    "constants",
    "logging",
]

import pacdb.common.compression as compression
import pacdb.common.constants as constants
import pacdb.common.logging as logging
