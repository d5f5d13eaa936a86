from __future__ import annotations

from pathlib import Path

from addonpacker.config import LUA_MERGED_DIR, LUA_STAGING_DIR
from addonpacker.core.mdl import MODEL_EXT
from addonpacker.core.whitelist import uses_material, uses_model
from addonpacker.models import AddonPack, FileEntry, Placement

CAT_MODELS = "models"
CAT_MATERIALS = "materials"
CAT_LUA = "lua"


def _dropped(entry: FileEntry) -> Placement:
    return Placement(entry=entry, keep=False, destinations=[], counted=False)


def resolve_placement(
    entry: FileEntry,
    pack: AddonPack,
    addon_name: str,
    output_root: str,
) -> Placement:
    """
    Decide whether a file is kept and where it goes.

      models     kept if unfiltered or stem is whitelisted; .mdl decoded when filtered
      materials  kept if unfiltered or already referenced by a decoded model
      lua        always kept, staged per addon and merged per pack (not counted)
      other      always kept
    """
    out_root = Path(output_root)
    rel = Path(*entry.relpath.split("/"))

    if entry.category == CAT_LUA:
        return Placement(
            entry=entry,
            keep=True,
            destinations=[
                str(out_root / LUA_STAGING_DIR / addon_name / rel),
                str(out_root / LUA_MERGED_DIR / pack.name / rel),
            ],
            counted=False,
        )

    decode = False
    if entry.category == CAT_MODELS and pack.whitelist:
        if not uses_model(pack, entry.stem):
            return _dropped(entry)
        decode = entry.ext == MODEL_EXT
    elif entry.category == CAT_MATERIALS and pack.whitelist:
        if not uses_material(pack, entry.key):
            return _dropped(entry)

    return Placement(
        entry=entry,
        keep=True,
        destinations=[str(out_root / pack.name / rel)],
        decode=decode,
    )
