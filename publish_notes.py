"""
Publish a directory of notes to secret-addressed HTML pages.

Each eligible note ``name.md`` in the input directory becomes

    <outdir>/<address>/index.html   the page rendered through the template
    <outdir>/<address>/note.md      the untouched source

where the address is derived from the note's stem and the site secret.
Top-level files in ``<confdir>/static`` are copied to ``<outdir>``.

Notes are processed one at a time. An I/O error aborts the whole run; a
note that isn't valid UTF-8 is reported and skipped. Running two builds
against the same output directory at once is not supported.
"""

from __future__ import annotations

import logging
from pathlib import Path
import shutil
from typing import AbstractSet, List, Optional

from markupsafe import Markup

from knot_config import Config
from note_address import FILENAME_BYTES, derive_address, note_stem
from render_markdown import render_file

log = logging.getLogger(__name__)

NOTE_FILENAME = "note.md"
INDEX_FILENAME = "index.html"


# -- helpers: choosing notes --
def extension(name: str) -> Optional[str]:
    """Text after the last dot; "" if the name ends in a dot, None if it has none."""
    if "." not in name:
        return None
    return name.rsplit(".", 1)[1]


def is_note_name(name: str, extensions: AbstractSet[str]) -> bool:
    """Note-like names: not hidden or underscore-prefixed, with a known extension.

    Extension matching is case-sensitive: ``notes.MD`` is not an ``md`` note.
    """
    if name.startswith((".", "_")):
        return False
    ext = extension(name)
    return ext is not None and ext in extensions


# -- publishing --
def publish_note(note_path: Path, config: Config) -> Optional[str]:
    """Render one note into its address directory.

    Returns the address, or None if the note was skipped. OSErrors propagate.
    """
    name = note_path.name
    if not name:
        log.warning("skipping %s: no file name", note_path)
        return None

    address = derive_address(note_stem(name), config.secret, FILENAME_BYTES)
    try:
        content, title = render_file(note_path)
    except UnicodeDecodeError as exc:
        log.warning("skipping %s: not valid UTF-8 (%s)", note_path, exc.reason)
        return None

    # destination directory, only for notes that rendered
    note_dir = config.outdir / address
    note_dir.mkdir(parents=True, exist_ok=True)
    if not config.quiet:
        print(f"{name} -> {address}")

    page = config.template.render(
        content=Markup(content),
        title=title,
        sourcefile=NOTE_FILENAME,
        name=name,
        key=address,
    )
    (note_dir / INDEX_FILENAME).write_text(page, encoding="utf-8")

    # keep the raw markdown next to the page
    shutil.copyfile(note_path, note_dir / NOTE_FILENAME)
    return address


def publish_entry(entry: Path, config: Config) -> Optional[str]:
    """Publish an input directory entry if it looks like a note."""
    if not is_note_name(entry.name, config.extensions):
        log.debug("ignoring %s", entry)
        return None
    if entry.is_dir():
        # directories as notes are not supported
        log.debug("ignoring directory %s", entry)
        return None
    return publish_note(entry, config)


def copy_static(config: Config) -> List[Path]:
    """Copy top-level files from the static directory into the output root."""
    copied: List[Path] = []
    static_dir = config.staticdir
    if not static_dir.is_dir():
        log.debug("no static directory at %s", static_dir)
        return copied

    for src in sorted(static_dir.iterdir()):
        if not src.is_file():
            log.debug("not copying %s: not a file", src)
            continue
        dst = config.outdir / src.name
        if not config.quiet:
            print(f"{src} -> {dst}")
        shutil.copyfile(src, dst)
        copied.append(dst)
    return copied


def publish_notes(config: Config) -> List[str]:
    """Publish every note in the input directory, then copy static files.

    Returns the addresses of the published notes.
    """
    config.outdir.mkdir(parents=True, exist_ok=True)

    addresses: List[str] = []
    for entry in sorted(config.indir.iterdir(), key=lambda p: p.name):
        address = publish_entry(entry, config)
        if address is not None:
            addresses.append(address)

    copy_static(config)
    return addresses
