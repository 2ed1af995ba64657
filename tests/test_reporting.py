import json
from pathlib import Path

import pytest
from pyv_cachesim.config import SimConfig, LevelConfig
from pyv_cachesim.cache.hierarchy import CacheHierarchy
from pyv_cachesim.utils.reporting import format_summary, generate_report, generate_report_json


@pytest.fixture
def sample_config():
    """Provides a sample SimConfig."""
    return SimConfig(trace="sample.trace", levels=[
        LevelConfig(name="L1", size=64, line_size=16, kind="direct"),
        LevelConfig(name="L2", size=256, line_size=16, kind="full", replacement_policy="rr"),
    ])


@pytest.fixture
def sample_hierarchy(sample_config):
    """A hierarchy after replaying a short trace."""
    hierarchy = CacheHierarchy.from_configs(sample_config.levels)
    hierarchy.run([0x00, 0x40, 0x00, 0x40, 0x80])
    return hierarchy


def test_generate_report_json(sample_hierarchy):
    report = generate_report_json(sample_hierarchy)

    assert [c["name"] for c in report["caches"]] == ["L1", "L2"]
    l1, l2 = report["caches"]
    assert (l1["hits"], l1["misses"]) == (0, 5)
    assert (l2["hits"], l2["misses"]) == (2, 3)
    assert report["main_memory_accesses"] == 3
    assert report["total_accesses"] == 5
    assert "config" not in report


def test_generate_report_json_with_config(sample_hierarchy, sample_config):
    report = generate_report_json(sample_hierarchy, sample_config)

    assert report["config"]["trace"] == "sample.trace"
    levels = report["config"]["levels"]
    assert levels[0]["replacement_policy"] is None
    assert levels[1]["replacement_policy"] == "rr"
    # Must be serializable as-is
    json.dumps(report)


def test_format_summary(sample_hierarchy):
    summary = format_summary(generate_report_json(sample_hierarchy))
    assert "L1" in summary
    assert "40.00%" in summary
    assert "Main Memory Accesses: 3" in summary


def test_generate_report_writes_artifacts(tmp_path: Path, sample_hierarchy, capsys):
    report = generate_report_json(sample_hierarchy)
    out_dir = tmp_path / "reports"

    generate_report(report, str(out_dir))

    with open(out_dir / "report.json") as f:
        saved = json.load(f)
    assert saved == report
    assert (out_dir / "report.html").exists()

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Cache Hits/Misses" in captured.err
    assert "Reports generated in" in captured.err
