from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Set

from addonpacker.errors import ConfigError, ConfigIOError

APP_NAME = "Addon Packer"
APP_VERSION = "0.3.0"

DEFAULT_CONFIG_NAME = "config.json"
WHITELIST_MANIFEST_NAME = "models.json"
LUA_STAGING_DIR = "_lua"
LUA_MERGED_DIR = "_lua_merged"


@dataclass(frozen=True)
class PackerConfig:
    input_root: str
    output_root: str
    ignored_packs: Set[str] = field(default_factory=set)
    model_whitelist: bool = False


def to_json_dict(config: PackerConfig) -> Dict[str, Any]:
    return {
        "input_folder": config.input_root,
        "output_folder": config.output_root,
        "ignored_addon_packs": sorted(config.ignored_packs),
        "model_whitelist": bool(config.model_whitelist),
    }


def from_json_dict(d: Dict[str, Any]) -> PackerConfig:
    if not isinstance(d, dict):
        raise ConfigError("Config must be a JSON object.")

    missing = [k for k in ("input_folder", "output_folder") if not str(d.get(k) or "").strip()]
    if missing:
        raise ConfigError(f"Config is missing required key(s): {', '.join(missing)}")

    ignored = d.get("ignored_addon_packs") or []
    if not isinstance(ignored, list):
        raise ConfigError("'ignored_addon_packs' must be a list of pack names.")

    whitelist = d.get("model_whitelist", False)
    if not isinstance(whitelist, bool):
        raise ConfigError("'model_whitelist' must be true or false.")

    return PackerConfig(
        input_root=str(d["input_folder"]).strip(),
        output_root=str(d["output_folder"]).strip(),
        ignored_packs={str(x) for x in ignored if str(x).strip()},
        model_whitelist=whitelist,
    )


def load_config(path: str) -> PackerConfig:
    p = Path(path)
    try:
        d = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigIOError(str(p), str(e)) from e
    except ValueError as e:
        raise ConfigIOError(str(p), f"invalid JSON ({e})") from e
    return from_json_dict(d)


def save_config(path: str, config: PackerConfig) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(to_json_dict(config), indent=2), encoding="utf-8")
    return p
