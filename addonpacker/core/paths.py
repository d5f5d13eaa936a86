from __future__ import annotations

from pathlib import PurePosixPath

VTX_TAGS = {"dx80", "dx90", "sw", "xbox"}


def normalize_relpath(path: str) -> str:
    """
    Canonical relative path: "/" separators, no empty or "." components.
    "materials\\Foo//bar.vmt" -> "materials/Foo/bar.vmt"
    """
    parts = [p for p in path.replace("\\", "/").split("/") if p not in ("", ".")]
    return "/".join(parts)


def path_key(path: str) -> str:
    # Lookup key for case-insensitive path membership.
    return normalize_relpath(path).casefold()


def model_stem(name: str) -> str:
    """
    File name without its extension. Mesh-strip files also lose their
    hardware tag, so every companion file of a model shares one stem:
    "crate.mdl", "crate.vvd", "crate.dx90.vtx" -> "crate".
    Other dots are part of the name ("props.v2.mdl" -> "props.v2").
    """
    p = PurePosixPath(normalize_relpath(name))
    stem = p.stem
    if p.suffix.lower() == ".vtx":
        tagged = PurePosixPath(stem)
        if tagged.suffix.lower().lstrip(".") in VTX_TAGS:
            return tagged.stem
    return stem
