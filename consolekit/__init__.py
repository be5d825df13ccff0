__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'consolekit'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .application import *
from .args import *
from .arguments import *
from .commands import *
from .faults import *
from .formats import *
from .handlers import *
from .help import *
from .layout import *
from .logs import *
from .parser import *
from .resolver import *
from .streams import *
from .styles import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the application
__all__ += application.__all__  # type: ignore[attr-defined]
# Load the exposed API of the raw and bound arguments
__all__ += args.__all__  # type: ignore[attr-defined]
# Load the exposed API of the descriptors
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the commands
__all__ += commands.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the formats
__all__ += formats.__all__  # type: ignore[attr-defined]
# Load the exposed API of the handlers
__all__ += handlers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help pages
__all__ += help.__all__  # type: ignore[attr-defined]
# Load the exposed API of the layout engine
__all__ += layout.__all__  # type: ignore[attr-defined]
# Load the exposed API of the logging setup
__all__ += logs.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the streams
__all__ += streams.__all__  # type: ignore[attr-defined]
# Load the exposed API of the styles
__all__ += styles.__all__  # type: ignore[attr-defined]
