from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple

from addonpacker.core.paths import model_stem, normalize_relpath, path_key
from addonpacker.errors import FilesystemError
from addonpacker.models import FileEntry

MODELS_DIR = "models"


def _walk_key(entry: os.DirEntry) -> Tuple[bool, str]:
    # "models" sorts ahead of its siblings so models are decoded before any
    # material is judged; the rest is plain name order.
    return (entry.name != MODELS_DIR, entry.name)


def _list_dir(path: Path) -> List[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return list(it)
    except OSError as e:
        raise FilesystemError("DIR_UNREADABLE", f"Cannot list folder: {path} ({e})", str(path)) from e


def _subfolders(path: Path) -> List[str]:
    return sorted(e.name for e in _list_dir(path) if e.is_dir(follow_symlinks=False))


def list_addon_packs(input_root: str, ignored: Optional[Set[str]] = None) -> List[str]:
    """
    Pack names under the input root, sorted, ignored names removed.
    """
    root = Path(input_root)
    if not root.is_dir():
        raise FilesystemError("INPUT_MISSING", f"Input root is not a directory: {input_root}", input_root)

    ignored = ignored or set()
    return [name for name in _subfolders(root) if name not in ignored]


def list_addons(pack_root: Path) -> List[str]:
    if not pack_root.is_dir():
        return []
    return _subfolders(pack_root)


def walk_addon(addon_root: Path) -> Iterator[Path]:
    """
    Yield every file under an addon, depth first.

    At each level a "models" entry comes first, then the remaining entries by
    name (files and folders interleaved). Symlinked folders are not entered.
    """
    for entry in sorted(_list_dir(addon_root), key=_walk_key):
        if entry.is_dir(follow_symlinks=False):
            yield from walk_addon(Path(entry.path))
        elif entry.is_file():
            yield Path(entry.path)


def build_file_entry(src: Path, addon_root: Path) -> FileEntry:
    relpath = normalize_relpath(str(src.relative_to(addon_root)))
    parts = relpath.split("/")
    # Files sitting directly in the addon folder have no category.
    category = parts[0] if len(parts) > 1 else ""

    return FileEntry(
        src=str(src),
        relpath=relpath,
        key=path_key(relpath),
        category=category,
        stem=model_stem(src.name),
        ext=src.suffix.lower().lstrip("."),
    )
