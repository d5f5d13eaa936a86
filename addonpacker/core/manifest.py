from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from addonpacker.config import PackerConfig
from addonpacker.models import PackSummary


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def build_manifest_dict(
    tool_name: str,
    tool_version: str,
    config: PackerConfig,
    summaries: List[PackSummary],
) -> Dict[str, Any]:
    packs_out: List[Dict[str, Any]] = []
    for s in summaries:
        packs_out.append(
            {
                "pack": s.pack,
                "addons": list(s.addons),
                "whitelist": s.whitelist,
                "copied": s.copied,
                "dropped": s.dropped,
                "decoded_models": s.decoded_models,
                "size_bytes": s.total_size,
            }
        )

    manifest = {
        "tool": tool_name,
        "version": tool_version,
        "timestamp_utc": _utc_now_iso(),
        "input_root": config.input_root,
        "output_root": config.output_root,
        "model_whitelist": config.model_whitelist,
        "ignored_packs": sorted(config.ignored_packs),
        "packs": packs_out,
        "totals": {
            "copied": sum(s.copied for s in summaries),
            "dropped": sum(s.dropped for s in summaries),
            "size_bytes": sum(s.total_size for s in summaries),
        },
    }
    return manifest


def write_manifest_json(
    manifest: Dict[str, Any],
    manifest_path: str,
) -> str:
    path = Path(manifest_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)

    return str(path)
