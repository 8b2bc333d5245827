"""
package: mstair.stringify.base
"""

# <AUTOGEN_INIT>
from mstair.stringify.base import (
    config,
    fs_helpers,
    types,
)


__all__ = [
    "config",
    "fs_helpers",
    "types",
]
# </AUTOGEN_INIT>
