from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import Any, Dict
from ..cache.hierarchy import CacheHierarchy
from ..config import SimConfig
from . import viz


def generate_report_json(hierarchy: CacheHierarchy, config: SimConfig | None = None) -> Dict[str, Any]:
    """Generates a JSON-compatible dictionary from the final level counters."""
    report_data = hierarchy.stats()
    if config is not None:
        report_data["config"] = {
            "config_file": config.config_file,
            "trace": config.trace,
            "levels": [
                {
                    "name": lvl.name,
                    "size": lvl.size,
                    "line_size": lvl.line_size,
                    "kind": lvl.kind,
                    "replacement_policy": str(lvl.policy) if not lvl.is_direct else None,
                }
                for lvl in config.levels
            ],
        }
    return report_data


def format_summary(report_data: Dict[str, Any]) -> str:
    lines = ["Cache Statistics:"]
    for cache in report_data["caches"]:
        lines.append(f"  {cache['name']:<8} hits: {cache['hits']:>10}  misses: {cache['misses']:>10}"
                     f"  hit rate: {cache['hit_rate']:.2%}")
    lines.append(f"Main Memory Accesses: {report_data['main_memory_accesses']}")
    return "\n".join(lines)


def generate_report(report_data: Dict[str, Any], report_dir: str):
    """Generates all report artifacts."""
    output_dir = Path(report_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with open(output_dir / "report.json", "w") as f:
        json.dump(report_data, f, indent=4)

    viz.export_hit_miss_chart(report_data['caches'], str(output_dir / "report.html"))

    # stdout carries only the JSON report
    print(viz.export_hit_miss_ascii(report_data['caches']), file=sys.stderr)
    print(format_summary(report_data), file=sys.stderr)
    print(f"\nReports generated in {output_dir.absolute()}", file=sys.stderr)
