__title__ = 'sextant'
__author__ = 'Sextant contributors'
__license__ = 'MIT'
__version__ = "0.1.0"

from .config import *
from .faults import *
from .lexer import *
from .rules import *
from .symbols import *
from .applied import *
from .suggestions import *
from .results import *
from .parser import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the configuration
__all__ += config.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the lexer
__all__ += lexer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the rules
__all__ += rules.__all__  # type: ignore[attr-defined]
# Load the exposed API of the symbols
__all__ += symbols.__all__  # type: ignore[attr-defined]
# Load the exposed API of the applied options
__all__ += applied.__all__  # type: ignore[attr-defined]
# Load the exposed API of the suggestion engine
__all__ += suggestions.__all__  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
