"""Workspace manifest (``package.json``) loading and persistence.

Manifests are rewritten atomically: the new content goes to a temporary file
in the same directory which then replaces the original, while an exclusive
``portalocker`` lock on the current file serialises concurrent writers. Key
order, indentation and the trailing newline of the original file are kept so
that a pin shows up as a one-line diff.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

import portalocker

from pin_deps.structs import DependencyType, Descriptor, Ident, parse_ident

__all__ = ["MANIFEST_FILENAME", "Manifest", "ManifestError"]

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"


class ManifestError(RuntimeError):
    """Raised when a manifest cannot be read or parsed."""


def _detect_indent(text: str) -> str:
    """Return the indentation used by the second line of ``text``."""

    lines = text.splitlines()
    if len(lines) < 2:
        return "  "
    second = lines[1]
    indent = second[: len(second) - len(second.lstrip(" \t"))]
    return indent or "  "


def _parse_section(
    raw: object, path: Path, section: str
) -> dict[Ident, Descriptor]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ManifestError(f"'{section}' must be an object in {path}")
    entries: dict[Ident, Descriptor] = {}
    for name, range_ in raw.items():
        if not isinstance(range_, str):
            logger.debug("Ignoring non-string range for %s in %s", name, path)
            continue
        try:
            ident = parse_ident(name)
        except ValueError:
            logger.debug("Ignoring invalid package name %r in %s", name, path)
            continue
        entries[ident] = Descriptor(ident=ident, range=range_)
    return entries


@dataclass(slots=True)
class Manifest:
    """In-memory view of a workspace ``package.json``.

    Attributes:
        path: Location of the manifest file.
        raw: Parsed JSON document; fields other than the dependency maps are
            written back untouched.
        dependencies: Regular dependencies keyed by identity, in file order.
        dev_dependencies: Development dependencies keyed by identity.
        indent: Indentation unit detected in the original file.
        trailing_newline: Whether the original file ended with a newline.
    """

    path: Path
    raw: dict[str, object] = field(default_factory=dict)
    dependencies: dict[Ident, Descriptor] = field(default_factory=dict)
    dev_dependencies: dict[Ident, Descriptor] = field(default_factory=dict)
    indent: str = "  "
    trailing_newline: bool = True

    @classmethod
    def load(cls, path: Path) -> Manifest:
        """Read and parse the manifest at ``path``.

        Raises:
            ManifestError: If the file is unreadable, not JSON, or not an
                object.
        """

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ManifestError(f"Unable to read {path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest {path} must contain a JSON object")

        return cls(
            path=path,
            raw=data,
            dependencies=_parse_section(
                data.get(DependencyType.REGULAR.value), path, "dependencies"
            ),
            dev_dependencies=_parse_section(
                data.get(DependencyType.DEV.value), path, "devDependencies"
            ),
            indent=_detect_indent(text),
            trailing_newline=text.endswith("\n"),
        )

    @property
    def name(self) -> Ident | None:
        """Return the declared package identity, if any."""

        value = self.raw.get("name")
        if not isinstance(value, str):
            return None
        try:
            return parse_ident(value)
        except ValueError:
            return None

    @property
    def workspace_patterns(self) -> tuple[str, ...]:
        """Return the ``workspaces`` globs (array or ``{packages}`` form)."""

        value = self.raw.get("workspaces")
        if isinstance(value, dict):
            value = value.get("packages")
        if not isinstance(value, list):
            return ()
        return tuple(item for item in value if isinstance(item, str))

    def section(self, dependency_type: DependencyType) -> dict[Ident, Descriptor]:
        if dependency_type is DependencyType.REGULAR:
            return self.dependencies
        return self.dev_dependencies

    def set_range(
        self, ident: Ident, range_: str, dependency_type: DependencyType
    ) -> Descriptor:
        """Replace the declared range of ``ident`` in one section.

        Returns:
            The updated descriptor.

        Raises:
            KeyError: If ``ident`` is not declared in that section.
        """

        entries = self.section(dependency_type)
        updated = entries[ident].with_range(range_)
        entries[ident] = updated
        return updated

    def to_document(self) -> dict[str, object]:
        """Return the JSON document reflecting the in-memory sections."""

        document = dict(self.raw)
        for dependency_type in DependencyType:
            entries = self.section(dependency_type)
            raw_section = document.get(dependency_type.value)
            if not entries or not isinstance(raw_section, dict):
                continue
            merged = dict(raw_section)
            for ident, descriptor in entries.items():
                merged[ident.key] = descriptor.range
            document[dependency_type.value] = merged
        return document

    def render(self) -> str:
        """Serialise the manifest the way it was formatted on disk."""

        text = json.dumps(self.to_document(), indent=self.indent, ensure_ascii=False)
        return f"{text}\n" if self.trailing_newline else text

    def persist(self) -> None:
        """Write the manifest back to :attr:`path` atomically."""

        content = self.render().encode("utf-8")
        with _locked(self.path):
            temp_path: Path | None = None
            try:
                with tempfile.NamedTemporaryFile(
                    "wb",
                    dir=str(self.path.parent),
                    prefix=f".{self.path.name}.",
                    delete=False,
                ) as tmp:
                    temp_path = Path(tmp.name)
                    tmp.write(content)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.chmod(temp_path, stat.S_IMODE(self.path.stat().st_mode))
                os.replace(temp_path, self.path)
            except Exception:
                if temp_path is not None and temp_path.exists():
                    temp_path.unlink(missing_ok=True)
                raise
        self.raw = self.to_document()
        logger.debug("Persisted manifest %s", self.path)


@contextmanager
def _locked(path: Path) -> Iterator[IO[bytes]]:
    """Hold an exclusive lock on ``path`` for the duration of a rewrite."""

    with path.open("rb") as handle:
        portalocker.lock(handle, portalocker.LOCK_EX)
        try:
            yield handle
        finally:
            portalocker.unlock(handle)
