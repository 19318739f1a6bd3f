"""JSON export for extraction results."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from sbtanalyzer.runtime.resolver import ExtractResult

logger = logging.getLogger("sbtanalyzer.export.json")


def to_package_files(result: Optional[ExtractResult]) -> List[Dict[str, Any]]:
    """Convert a driver result to ``[{"packageFile": ..., "deps": [...]}]``."""
    if not result:
        return []
    return [
        {"packageFile": package_file, "deps": [dep.to_dict() for dep in deps]}
        for package_file, deps in result.items()
    ]


def export_json(result: Optional[ExtractResult], output_path: Path) -> None:
    """Export extraction result to JSON format.

    Args:
        result: Driver result; None is written as an empty list.
        output_path: Output file path.
    """
    logger.info("Exporting dependencies to JSON: %s", output_path)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    data = to_package_files(result)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    logger.info(
        "JSON export completed: %d file(s), %d dependency(ies)",
        len(data),
        sum(len(entry["deps"]) for entry in data),
    )
