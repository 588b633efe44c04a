import json

import pytest


@pytest.fixture
def write_spine(tmp_path):
    """Write a Spine JSON into tmp_path and return its path as a string."""
    def _write(doc, name="skeleton.json"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def no_default_template(tmp_path, monkeypatch):
    # the default template is looked up relative to the working directory
    monkeypatch.chdir(tmp_path)
