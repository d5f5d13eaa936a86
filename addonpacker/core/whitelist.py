from __future__ import annotations

import json
import logging
from typing import Iterable

from addonpacker.config import WHITELIST_MANIFEST_NAME
from addonpacker.core.paths import model_stem, path_key
from addonpacker.errors import ConfigIOError
from addonpacker.models import AddonPack

logger = logging.getLogger(__name__)


def load_whitelist(pack: AddonPack, enabled: bool) -> None:
    """
    Activate whitelist mode for a pack when it is enabled globally and the pack
    ships a models.json (a JSON array of model paths). A missing manifest leaves
    the pack unfiltered.
    """
    pack.whitelist = False
    pack.used_models = set()
    pack.used_materials = set()

    if not enabled:
        return

    manifest = pack.path / WHITELIST_MANIFEST_NAME
    if not manifest.is_file():
        logger.info("%s: no %s, whitelist inactive", pack.name, WHITELIST_MANIFEST_NAME)
        return

    try:
        entries = json.loads(manifest.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigIOError(str(manifest), str(e)) from e
    except ValueError as e:
        raise ConfigIOError(str(manifest), f"invalid JSON ({e})") from e

    if not isinstance(entries, list) or not all(isinstance(x, str) for x in entries):
        raise ConfigIOError(str(manifest), "expected a JSON array of model paths")

    pack.used_models = {model_stem(x) for x in entries if x.strip()}
    pack.whitelist = True
    logger.info("%s: whitelist active, %d model(s) listed", pack.name, len(pack.used_models))


def uses_model(pack: AddonPack, stem: str) -> bool:
    return stem in pack.used_models


def uses_material(pack: AddonPack, key: str) -> bool:
    # key is already case-folded (FileEntry.key)
    return key in pack.used_materials


def add_materials(pack: AddonPack, material_paths: Iterable[str]) -> int:
    before = len(pack.used_materials)
    pack.used_materials.update(path_key(p) for p in material_paths)
    return len(pack.used_materials) - before
