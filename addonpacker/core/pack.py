from __future__ import annotations

import shutil
from pathlib import Path

from addonpacker.config import LUA_MERGED_DIR, LUA_STAGING_DIR
from addonpacker.errors import ConfigError, FilesystemError


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def prepare_output_root(output_root: str, input_root: str) -> Path:
    """
    Wipe the output root and recreate it with the two script staging folders.
    Every run starts from an empty tree.
    """
    out_root = Path(output_root).resolve()
    in_root = Path(input_root).resolve()

    if _is_within(in_root, out_root):
        raise ConfigError(f"Output root {out_root} contains the input root; refusing to wipe it.")
    if _is_within(out_root, in_root):
        raise ConfigError(f"Output root {out_root} is inside the input root.")

    if out_root.exists():
        try:
            if out_root.is_dir() and not out_root.is_symlink():
                shutil.rmtree(out_root)
            else:
                out_root.unlink()
        except OSError as e:
            raise FilesystemError("DST_WIPE_FAILED", f"Failed clearing output root: {out_root} ({e})", str(out_root)) from e

    try:
        out_root.mkdir(parents=True)
        (out_root / LUA_STAGING_DIR).mkdir()
        (out_root / LUA_MERGED_DIR).mkdir()
    except OSError as e:
        raise FilesystemError("DST_DIR_CREATE_FAILED", f"Failed creating output root: {out_root} ({e})", str(out_root)) from e

    return out_root


def read_source(src: str) -> bytes:
    try:
        return Path(src).read_bytes()
    except OSError as e:
        raise FilesystemError("SRC_READ_FAILED", f"Failed reading source: {src} ({e})", src) from e


def copy_file(src: str, dst: str) -> int:
    """
    Copy one file (safe-copy, never move), creating destination folders on
    demand. Returns the number of bytes copied.
    """
    src_p = Path(src)
    dst_p = Path(dst)

    try:
        dst_p.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(
            "DST_DIR_CREATE_FAILED",
            f"Failed creating destination folder: {dst_p.parent} ({e})",
            str(dst_p.parent),
        ) from e

    try:
        shutil.copy2(src_p, dst_p)
        return int(src_p.stat().st_size)
    except OSError as e:
        raise FilesystemError("COPY_FAILED", f"Copy failed: {src_p} -> {dst_p} ({e})", src) from e
