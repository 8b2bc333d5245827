"""
package: mstair.stringify
"""

# <AUTOGEN_INIT>
from mstair.stringify import (
    base,
    config,
    escaping,
    formatter,
    nodes,
    stringify_api,
    xlogging,
)


__all__ = [
    "base",
    "config",
    "escaping",
    "formatter",
    "nodes",
    "stringify_api",
    "xlogging",
]
# </AUTOGEN_INIT>

from mstair.stringify.base.types import CALCULATE, MISSING
from mstair.stringify.formatter import DefaultFormatter, RawString, default_formatter
from mstair.stringify.nodes import (
    Node,
    RenderContext,
    RenderResult,
    Stringifiable,
    block,
    inline,
    list_,
    text,
)
from mstair.stringify.stringify_api import stringify


__all__ += [
    "CALCULATE",
    "DefaultFormatter",
    "MISSING",
    "Node",
    "RawString",
    "RenderContext",
    "RenderResult",
    "Stringifiable",
    "block",
    "default_formatter",
    "inline",
    "list_",
    "stringify",
    "text",
]

__version__ = "0.1.0"
