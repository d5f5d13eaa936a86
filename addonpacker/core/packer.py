from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from addonpacker.config import PackerConfig
from addonpacker.core.mdl import decode_model
from addonpacker.core.pack import copy_file, prepare_output_root, read_source
from addonpacker.core.planner import resolve_placement
from addonpacker.core.scanner import build_file_entry, list_addon_packs, list_addons, walk_addon
from addonpacker.core.whitelist import add_materials, load_whitelist
from addonpacker.errors import FormatError
from addonpacker.models import AddonPack, PackProgress, PackSummary

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[PackProgress], None]


@dataclass
class _AddonCounts:
    copied: int = 0
    dropped: int = 0
    decoded: int = 0


def process_addon(pack: AddonPack, addon_root: Path, output_root: str) -> _AddonCounts:
    """
    Walk one addon (models first) and copy or drop each file.

    Decoding a kept model grows pack.used_materials, which later material
    decisions in this pack depend on.
    """
    counts = _AddonCounts()
    addon_name = addon_root.name

    for src in walk_addon(addon_root):
        entry = build_file_entry(src, addon_root)
        placement = resolve_placement(entry, pack, addon_name, output_root)

        if not placement.keep:
            counts.dropped += 1
            logger.debug("drop %s/%s", addon_name, entry.relpath)
            continue

        if placement.decode:
            try:
                model = decode_model(read_source(entry.src))
            except FormatError as e:
                e.path = entry.src
                raise
            added = add_materials(pack, model.material_paths)
            counts.decoded += 1
            logger.debug("decoded %s: %d new material path(s)", entry.relpath, added)

        size = 0
        for dst in placement.destinations:
            size = copy_file(entry.src, dst)
        if placement.counted:
            pack.total_size += size
        counts.copied += 1

    return counts


def run_packer(config: PackerConfig, progress_cb: Optional[ProgressCallback] = None) -> List[PackSummary]:
    """
    Rebuild the output tree from scratch, one pack at a time.

    Any PackerError aborts the run; the output tree is left as far as it got.
    """
    pack_names = list_addon_packs(config.input_root, config.ignored_packs)
    prepare_output_root(config.output_root, config.input_root)

    summaries: List[PackSummary] = []
    input_root = Path(config.input_root)

    for idx, name in enumerate(pack_names, start=1):
        pack = AddonPack(name=name, path=input_root / name)
        load_whitelist(pack, config.model_whitelist)
        logger.info('processing "%s" (%d/%d)', name, idx, len(pack_names))

        addons = list_addons(pack.path)
        copied = dropped = decoded = 0

        for addon in addons:
            if progress_cb:
                progress_cb(PackProgress(idx, len(pack_names), name, addon, pack.total_size))
            logger.info("- %s", addon)

            counts = process_addon(pack, pack.path / addon, config.output_root)
            copied += counts.copied
            dropped += counts.dropped
            decoded += counts.decoded

        if progress_cb:
            progress_cb(PackProgress(idx, len(pack_names), name, "", pack.total_size))
        logger.info("%s: total size - %.2f MB", name, pack.total_size / (1024 * 1024))

        summaries.append(
            PackSummary(
                pack=name,
                addons=addons,
                copied=copied,
                dropped=dropped,
                decoded_models=decoded,
                total_size=pack.total_size,
                whitelist=pack.whitelist,
            )
        )

    return summaries
