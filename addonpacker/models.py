from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set


@dataclass(frozen=True)
class DecodedModel:
    directories: List[str]
    textures: List[str]
    material_paths: List[str]  # "materials/<dir><texture>.vtf|.vmt", "/" separated


@dataclass(frozen=True)
class FileEntry:
    src: str
    relpath: str    # relative to the addon root, "/" separated
    key: str        # relpath case-folded, used for material lookups
    category: str   # "models" | "materials" | "lua" | anything else ("" at addon root)
    stem: str       # file name without (up to two) extensions
    ext: str        # normalized (lower, no dot) or ""


@dataclass(frozen=True)
class Placement:
    entry: FileEntry
    keep: bool
    destinations: List[str]
    decode: bool = False   # model binary to decode before copying
    counted: bool = True   # bytes added to the pack total


@dataclass
class AddonPack:
    name: str
    path: Path
    whitelist: bool = False
    used_models: Set[str] = field(default_factory=set)
    used_materials: Set[str] = field(default_factory=set)  # case-folded keys
    total_size: int = 0


@dataclass(frozen=True)
class PackProgress:
    pack_index: int
    pack_count: int
    pack: str
    addon: str  # "" once the pack is finished
    total_size: int


@dataclass(frozen=True)
class PackSummary:
    pack: str
    addons: List[str]
    copied: int
    dropped: int
    decoded_models: int
    total_size: int
    whitelist: bool
