"""Export the JSON Schemas of the pin-deps report payloads."""

from __future__ import annotations

import json
from pathlib import Path

from pin_deps.schemas import CURRENT_SCHEMA_VERSION, PinnableDependencies, RunSummary


def build_schemas() -> dict[str, object]:
    return {
        "pinnableDependencies": PinnableDependencies.model_json_schema(),
        "summary": RunSummary.model_json_schema(),
    }


def main(output_dir: Path | None = None) -> Path:
    """Write the report schemas next to the repository root.

    Returns:
        Path of the written file.
    """

    target = output_dir or Path(__file__).resolve().parent.parent
    output_path = target / f"report_schema_v{CURRENT_SCHEMA_VERSION}.json"
    output_path.write_text(json.dumps(build_schemas(), indent=2), encoding="utf-8")
    return output_path


if __name__ == "__main__":
    main()
