"""Pydantic models describing the public pin-deps JSON payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

SchemaVersionLiteral = Literal["0.1.0"]
CURRENT_SCHEMA_VERSION: SchemaVersionLiteral = "0.1.0"

PINNABLE_DEPENDENCIES_NAME = "pinnableDependencies"


class PinnableDependencies(RootModel[dict[str, dict[str, str]]]):
    """Planned pins keyed by workspace cwd, then by rendered reference.

    Example::

        {"/repo/packages/app": {"lodash:^4.17.0": "4.17.21"}}
    """

    model_config = ConfigDict(frozen=True)

    @field_validator("root")
    @classmethod
    def _validate_entries(
        cls, value: dict[str, dict[str, str]]
    ) -> dict[str, dict[str, str]]:
        for cwd, pins in value.items():
            if not cwd:
                raise ValueError("workspace cwd must not be empty")
            for reference, version in pins.items():
                if ":" not in reference:
                    raise ValueError(
                        f"reference {reference!r} must be rendered as name:range"
                    )
                if not version:
                    raise ValueError(f"version for {reference!r} must not be empty")
        return value

    @property
    def total(self) -> int:
        return sum(len(pins) for pins in self.root.values())


class RunSummary(BaseModel):
    """Counts reported at the end of a run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: SchemaVersionLiteral = Field(
        default=CURRENT_SCHEMA_VERSION,
        description="Semantic version of the summary schema.",
    )
    dry_run: bool = Field(..., description="Whether manifests were left untouched.")
    planned: int = Field(..., ge=0, description="Number of planned pins.")
    pinned: int = Field(..., ge=0, description="Number of entries rewritten.")
    saved: list[str] = Field(
        default_factory=list,
        description="Manifest paths written to disk.",
    )
    warnings: int = Field(..., ge=0, description="Number of warnings reported.")


__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "PINNABLE_DEPENDENCIES_NAME",
    "PinnableDependencies",
    "RunSummary",
    "SchemaVersionLiteral",
]
