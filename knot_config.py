"""
Site configuration: the secret, accepted note extensions and page template.

Everything lives in one configuration directory (``_knot`` by default):

    _knot/knot.toml       secret = "...", extensions = ["md", ...]
    _knot/template.html   Jinja2 page template
    _knot/static/         files copied as-is to the output root
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Union
import tomllib

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound, TemplateSyntaxError, select_autoescape

CONFIG_FILENAME = "knot.toml"
TEMPLATE_FILENAME = "template.html"
STATIC_DIRNAME = "static"

DEFAULT_EXTENSIONS = frozenset({"md", "mkdn", "markdown", "txt"})

PathLike = Union[str, Path]


class ConfigError(Exception):
    """The configuration directory is missing or invalid."""


@dataclass(frozen=True)
class Config:
    secret: str = field(repr=False)
    template: Template = field(repr=False)
    indir: Path
    outdir: Path
    confdir: Path
    quiet: bool = False
    extensions: FrozenSet[str] = DEFAULT_EXTENSIONS

    @property
    def staticdir(self) -> Path:
        return self.confdir / STATIC_DIRNAME


def read_settings(conffile: Path) -> dict:
    """Parse the TOML settings file."""
    try:
        with conffile.open("rb") as f:
            return tomllib.load(f)
    except OSError as exc:
        raise ConfigError(f"no config: cannot read {conffile} ({exc.strerror})") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config {conffile}: {exc}") from exc


def parse_extensions(settings: dict) -> FrozenSet[str]:
    if "extensions" not in settings:
        return DEFAULT_EXTENSIONS
    value = settings["extensions"]
    if not isinstance(value, list):
        raise ConfigError("extensions must be a list")
    if not all(isinstance(ext, str) for ext in value):
        raise ConfigError("extensions must be strings")
    return frozenset(value)


def load_template(confdir: Path) -> Template:
    """Compile ``template.html`` from the configuration directory.

    Autoescaping is on, so the rendered note body must be passed as Markup.
    """
    env = Environment(
        loader=FileSystemLoader(str(confdir)),
        autoescape=select_autoescape(["html"]),
        keep_trailing_newline=True,
    )
    try:
        return env.get_template(TEMPLATE_FILENAME)
    except TemplateNotFound as exc:
        raise ConfigError(f"no template found: {confdir / TEMPLATE_FILENAME}") from exc
    except TemplateSyntaxError as exc:
        raise ConfigError(f"template syntax error in {exc.filename} at line {exc.lineno}: {exc.message}") from exc


def load_config(confdir: PathLike, indir: PathLike, outdir: PathLike, quiet: bool = False) -> Config:
    """Load settings and template; raises ConfigError on any problem."""
    confdir = Path(confdir)
    settings = read_settings(confdir / CONFIG_FILENAME)

    secret = settings.get("secret")
    if secret is None:
        raise ConfigError(f"secret is missing from {confdir / CONFIG_FILENAME}")
    if not isinstance(secret, str):
        raise ConfigError("secret must be a string")

    return Config(
        secret=secret,
        template=load_template(confdir),
        indir=Path(indir),
        outdir=Path(outdir),
        confdir=confdir,
        quiet=quiet,
        extensions=parse_extensions(settings),
    )
