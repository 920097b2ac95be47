"""Library bootstrap: make haile's units importable and load them.

The load sequence is:

1. Resolve the directory that holds the ``haile`` package.
2. Register it at the front of ``sys.path`` unless it is already there.
3. Import the HTTP foundation (``requests``).
4. Import the ``version``, ``client`` and ``response`` units, in that
   order, so a unit may use anything an earlier unit defines.
5. Return a :class:`Namespace` aggregating the loaded units.

Loading is all-or-nothing: if a unit fails, every unit imported during
that attempt is unregistered again before the error propagates.
:func:`boot` runs the sequence once per process behind a lock; repeated
or concurrent calls get the cached :class:`Namespace`.
"""

from __future__ import annotations

import importlib
import logging
import os
import sys
import threading
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from haile.exceptions import DependencyMissingError, UnitNotFoundError

logger = logging.getLogger(__name__)

PACKAGE: str = "haile"
"""Import name of the namespace package."""

LIB_DIR: Path = Path(__file__).resolve().parent.parent
"""Directory containing the ``haile`` package."""

FOUNDATION: str = "requests"
"""Third-party HTTP library every unit builds on."""

UNITS: tuple[str, ...] = ("version", "client", "response")
"""Units loaded by :func:`load`, in load order."""


# ---------------------------------------------------------------------------
# Namespace aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Namespace:
    """The loaded library: its package name, root and units in load order."""

    name: str
    root: Path
    units: tuple[ModuleType, ...]

    @property
    def unit_names(self) -> tuple[str, ...]:
        return tuple(module.__name__.rsplit(".", 1)[-1] for module in self.units)

    def __getitem__(self, unit: str) -> ModuleType:
        for module in self.units:
            if module.__name__ == f"{self.name}.{unit}":
                return module
        raise KeyError(unit)

    def __contains__(self, unit: object) -> bool:
        return unit in self.unit_names


# ---------------------------------------------------------------------------
# Search path
# ---------------------------------------------------------------------------

def _normalize(entry: str | os.PathLike[str]) -> str:
    return os.path.normcase(os.path.abspath(os.fspath(entry)))


def register_load_path(
    directory: str | os.PathLike[str] = LIB_DIR,
    search_path: MutableSequence[str] | None = None,
) -> bool:
    """Put *directory* at the front of *search_path* unless already present.

    Entries are compared after normalisation, so ``src`` and
    ``/abs/src`` count as the same directory.

    Returns
    -------
    bool
        ``True`` when the entry was inserted, ``False`` when it was
        already registered.
    """
    path = sys.path if search_path is None else search_path
    wanted = _normalize(directory)
    if any(_normalize(entry) == wanted for entry in path if isinstance(entry, str)):
        return False
    path.insert(0, str(directory))
    logger.debug("Registered %s on the module search path", directory)
    return True


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

def require_foundation(name: str = FOUNDATION) -> ModuleType:
    """Import the HTTP foundation or raise :class:`DependencyMissingError`."""
    try:
        return importlib.import_module(name)
    except ModuleNotFoundError as exc:
        raise DependencyMissingError(
            f"{name} is not installed.",
            package=exc.name or name,
        ) from exc


def load_units(package: str = PACKAGE, units: Sequence[str] = UNITS) -> tuple[ModuleType, ...]:
    """Import ``package.<unit>`` for each unit, in order.

    Raises
    ------
    UnitNotFoundError
        If a unit module does not exist.
    DependencyMissingError
        If a unit imports a third-party package that is not installed.

    Any other exception raised while executing a unit propagates
    unchanged.  In every failure case the units imported by this call
    are unregistered first.
    """
    parent = importlib.import_module(package)
    already_loaded = {
        name for name in sys.modules if name.startswith(f"{package}.")
    }
    loaded: list[ModuleType] = []
    try:
        for unit in units:
            qualified = f"{package}.{unit}"
            try:
                module = importlib.import_module(qualified)
            except ModuleNotFoundError as exc:
                if exc.name == qualified:
                    raise UnitNotFoundError(
                        f"Required unit {qualified} was not found.",
                        unit=qualified,
                        hint=f"Expected {unit}.py next to {package}/__init__.py.",
                    ) from exc
                raise DependencyMissingError(
                    f"{exc.name} is not installed (required by {qualified}).",
                    package=exc.name or qualified,
                ) from exc
            logger.debug("Loaded unit %s", qualified)
            loaded.append(module)
    except BaseException:
        _unregister(parent, already_loaded)
        raise
    return tuple(loaded)


def _unregister(parent: ModuleType, keep: set[str]) -> None:
    """Drop every ``parent.*`` module not in *keep* and detach it from *parent*."""
    prefix = f"{parent.__name__}."
    for name in [n for n in sys.modules if n.startswith(prefix) and n not in keep]:
        del sys.modules[name]
        child = name[len(prefix):]
        if "." not in child and child in vars(parent):
            delattr(parent, child)
        logger.debug("Unregistered %s after failed load", name)


def load(
    package: str = PACKAGE,
    *,
    root: str | os.PathLike[str] = LIB_DIR,
    units: Sequence[str] = UNITS,
    foundation: str = FOUNDATION,
    search_path: MutableSequence[str] | None = None,
) -> Namespace:
    """Run the full load sequence once, without caching.

    :func:`boot` is the cached, thread-safe entry point; this function
    exists so the sequence can be driven against another package.
    """
    register_load_path(root, search_path)
    require_foundation(foundation)
    modules = load_units(package, units)
    return Namespace(name=package, root=Path(root), units=modules)


# ---------------------------------------------------------------------------
# One-shot initialisation
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_namespace: Namespace | None = None


def boot() -> Namespace:
    """Load haile once per process and return its :class:`Namespace`."""
    global _namespace
    with _lock:
        if _namespace is None:
            _namespace = load()
        return _namespace


def namespace() -> Namespace:
    """Return the loaded :class:`Namespace`, booting first if needed."""
    if _namespace is not None:
        return _namespace
    return boot()
