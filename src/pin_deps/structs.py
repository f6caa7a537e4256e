"""Identity, descriptor, locator and package records shared across pin-deps.

The shapes mirror the package-manager vocabulary: an :class:`Ident` names a
package independently of any range, a :class:`Descriptor` is an ident plus the
range a manifest declares, and a :class:`Locator` is an ident plus the opaque
reference of one concrete resolution.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

__all__ = [
    "DependencyType",
    "Descriptor",
    "Ident",
    "Locator",
    "Package",
    "ResolvedGraph",
    "parse_descriptor",
    "parse_ident",
    "parse_locator",
    "render_reference",
]

VIRTUAL_PREFIX: Final[str] = "virtual:"


class DependencyType(str, Enum):
    """Manifest section a dependency entry was declared in."""

    REGULAR = "dependencies"
    DEV = "devDependencies"


@dataclass(frozen=True, slots=True)
class Ident:
    """Logical dependency identity: scope plus name, never the range."""

    scope: str | None
    name: str

    @property
    def key(self) -> str:
        """Return the canonical ``@scope/name`` (or ``name``) string."""

        if self.scope:
            return f"@{self.scope}/{self.name}"
        return self.name

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True, slots=True)
class Descriptor:
    """A dependency declaration: identity plus the declared range."""

    ident: Ident
    range: str

    @property
    def scope(self) -> str | None:
        return self.ident.scope

    @property
    def name(self) -> str:
        return self.ident.name

    def with_range(self, range_: str) -> Descriptor:
        """Return a copy of the descriptor pointing at ``range_``."""

        return Descriptor(ident=self.ident, range=range_)

    def __str__(self) -> str:
        return f"{self.ident.key}@{self.range}"


@dataclass(frozen=True, slots=True)
class Locator:
    """One concrete resolution of a package, identified by its reference."""

    ident: Ident
    reference: str

    @property
    def is_virtual(self) -> bool:
        """Return ``True`` for peer-dependency specialised instances."""

        return self.reference.startswith(VIRTUAL_PREFIX)

    def devirtualize(self) -> Locator:
        """Return the underlying non-virtual locator.

        Virtual references have the shape ``virtual:<hash>#<inner>``; the
        inner reference names the shared package instance. Non-virtual
        locators are returned unchanged.
        """

        if not self.is_virtual:
            return self
        _, separator, inner = self.reference.partition("#")
        if not separator or not inner:
            raise ValueError(f"Malformed virtual reference: {self.reference!r}")
        return Locator(ident=self.ident, reference=inner)

    def __str__(self) -> str:
        return f"{self.ident.key}@{self.reference}"


@dataclass(frozen=True, slots=True)
class Package:
    """A resolved package record: locator plus exact version."""

    locator: Locator
    version: str | None

    @property
    def ident(self) -> Ident:
        return self.locator.ident


def parse_ident(value: str) -> Ident:
    """Parse ``@scope/name`` or ``name`` into an :class:`Ident`.

    Raises:
        ValueError: If ``value`` is empty or has a malformed scope.
    """

    text = value.strip()
    if not text:
        raise ValueError("Empty package name")
    if text.startswith("@"):
        scope, separator, name = text[1:].partition("/")
        if not separator or not scope or not name:
            raise ValueError(f"Invalid scoped package name: {value!r}")
        return Ident(scope=scope, name=name)
    return Ident(scope=None, name=text)


def _split_at_range(value: str) -> tuple[str, str]:
    """Split ``name@range`` on the first ``@`` that is not a scope marker."""

    index = value.find("@", 1)
    if index == -1:
        raise ValueError(f"Missing '@' separator in {value!r}")
    return value[:index], value[index + 1 :]


def parse_descriptor(value: str) -> Descriptor:
    """Parse a ``name@range`` string (as found in lockfile keys)."""

    name, range_ = _split_at_range(value.strip())
    return Descriptor(ident=parse_ident(name), range=range_)


def parse_locator(value: str) -> Locator:
    """Parse a ``name@reference`` string (as found in ``resolution`` fields)."""

    name, reference = _split_at_range(value.strip())
    return Locator(ident=parse_ident(name), reference=reference)


def render_reference(descriptor: Descriptor, *, scoped_prefix: str = "@") -> str:
    """Render ``@scope/name:range`` (or ``name:range``) for reports and filters.

    Args:
        descriptor: Dependency declaration to render.
        scoped_prefix: Marker emitted before the scope. Passing ``""`` yields
            the ``scope/name:range`` spelling accepted by filters.
    """

    scope = descriptor.scope
    prefix = f"{scoped_prefix}{scope}/" if scope else ""
    return f"{prefix}{descriptor.name}:{descriptor.range}"


@dataclass(slots=True)
class ResolvedGraph:
    """A fully resolved dependency graph.

    Attributes:
        resolutions: Declared descriptor to the locator it resolved to.
        packages: Package records keyed by locator, including virtual
            instances when the source graph carries them.
    """

    resolutions: dict[Descriptor, Locator] = field(default_factory=dict)
    packages: dict[Locator, Package] = field(default_factory=dict)

    def add(self, package: Package, descriptors: Iterable[Descriptor] = ()) -> None:
        """Register ``package`` and mark ``descriptors`` as resolving to it."""

        self.packages[package.locator] = package
        for descriptor in descriptors:
            self.resolutions[descriptor] = package.locator
