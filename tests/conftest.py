from pathlib import Path

import pytest

from knot_config import load_config

TEMPLATE = """<!doctype html>
<html>
  <head><title>{{ title }}</title></head>
  <body>
    {{ content }}
    <a href="{{ sourcefile }}">{{ name }}</a> <span class="key">{{ key }}</span>
  </body>
</html>
"""


def _write_confdir(confdir: Path, settings: str = 'secret = "s3cr3t"\n', template: str = TEMPLATE) -> Path:
    confdir.mkdir(parents=True, exist_ok=True)
    (confdir / "knot.toml").write_text(settings, encoding="utf-8")
    if template is not None:
        (confdir / "template.html").write_text(template, encoding="utf-8")
    return confdir


@pytest.fixture
def write_confdir():
    return _write_confdir


@pytest.fixture
def site(tmp_path):
    """An input directory, a valid config directory and an output path."""
    indir = tmp_path / "notes"
    indir.mkdir()
    confdir = _write_confdir(tmp_path / "_knot")
    return indir, confdir, tmp_path / "public"


@pytest.fixture
def config(site):
    indir, confdir, outdir = site
    return load_config(confdir, indir, outdir, quiet=True)
