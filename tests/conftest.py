import json
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def write_config(tmp_path: Path):
    """Returns a helper that writes a config document (YAML or JSON) with a 'caches' list."""
    def _write(caches, fmt="yaml", name=None, **extra):
        doc = {"caches": caches}
        doc.update(extra)
        path = tmp_path / (name or f"config.{fmt}")
        with open(path, "w") as f:
            if fmt == "json":
                json.dump(doc, f)
            else:
                yaml.dump(doc, f)
        return path
    return _write


@pytest.fixture
def write_trace(tmp_path: Path):
    """Returns a helper that writes addresses as 'R <hex>' trace lines."""
    def _write(addresses, name="test.trace", access_type="R"):
        path = tmp_path / name
        path.write_text("".join(f"{access_type} {addr:x}\n" for addr in addresses))
        return path
    return _write
