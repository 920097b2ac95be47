"""haile: a small HTTP client built on requests.

Importing the package runs :func:`haile.bootstrap.boot`, which registers
the library on ``sys.path``, checks that ``requests`` is installed and
loads the ``version``, ``client`` and ``response`` units in that order.
If any of them fails the import fails as a whole.
"""

import logging

from haile.bootstrap import Namespace, boot, namespace

logging.getLogger(__name__).addHandler(logging.NullHandler())

boot()

from haile.client import Client  # noqa: E402
from haile.config import ClientConfig  # noqa: E402
from haile.exceptions import HaileError  # noqa: E402
from haile.response import Response  # noqa: E402
from haile.version import __version__  # noqa: E402

__all__: list[str] = [
    "Client",
    "ClientConfig",
    "HaileError",
    "Namespace",
    "Response",
    "__version__",
    "boot",
    "namespace",
]
