"""Tests for the public JSON payload models."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from pin_deps.schemas import PinnableDependencies, RunSummary

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "export_report_schema.py"


def test_pinnable_dependencies_round_trips_plan_json() -> None:
    payload = PinnableDependencies({"/repo/a": {"@acme/ui:^1.0.0": "1.4.2"}})

    assert payload.total == 1
    assert payload.model_dump(mode="json") == {
        "/repo/a": {"@acme/ui:^1.0.0": "1.4.2"}
    }


@pytest.mark.parametrize(
    "data",
    [
        {"": {}},
        {"/repo": {"lodash": "4.17.21"}},
        {"/repo": {"lodash:^4.0.0": ""}},
    ],
)
def test_pinnable_dependencies_rejects_malformed_entries(data) -> None:
    with pytest.raises(ValidationError):
        PinnableDependencies(data)


def test_run_summary_forbids_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        RunSummary(dry_run=False, planned=0, pinned=0, warnings=0, extra=1)


def test_export_script_writes_both_schemas(tmp_path: Path) -> None:
    spec = importlib.util.spec_from_file_location("export_report_schema", SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    output = module.main(tmp_path)

    schemas = json.loads(output.read_text(encoding="utf-8"))
    assert output.name == "report_schema_v0.1.0.json"
    assert set(schemas) == {"pinnableDependencies", "summary"}
    assert "dry_run" in schemas["summary"]["properties"]
