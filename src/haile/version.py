"""Version metadata for haile.

Loaded first by the bootstrap; later units may read it.
"""

from __future__ import annotations

__version__ = "0.1.0"
