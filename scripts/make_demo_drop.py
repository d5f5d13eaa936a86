from __future__ import annotations

import json
import struct
from pathlib import Path


def _demo_mdl(directories, textures) -> bytes:
    dir_blob = b"".join(d.encode("utf-8") + b"\x00" for d in directories)
    tex_blob = b"".join(t.encode("utf-8") + b"\x00" for t in textures)
    return (
        b"IDST"
        + b"\x00" * 200
        + struct.pack("<iiii", len(textures), 224, len(directories), 220)
        + struct.pack("<ii", 228, 4 + len(dir_blob))
        + dir_blob
        + tex_blob
    )


def main():
    root = Path("demo_drop/addons")
    addon = root / "props_pack" / "crates"
    (addon / "models" / "props").mkdir(parents=True, exist_ok=True)
    (addon / "materials" / "models" / "props").mkdir(parents=True, exist_ok=True)
    (addon / "lua" / "autorun").mkdir(parents=True, exist_ok=True)
    (addon / "sound").mkdir(parents=True, exist_ok=True)

    (addon / "models" / "props" / "crate.mdl").write_bytes(_demo_mdl(["models\\props\\"], ["crate"]))
    (addon / "models" / "props" / "crate.vvd").write_bytes(b"dummy_vvd")
    (addon / "models" / "props" / "barrel.mdl").write_bytes(_demo_mdl(["models\\props\\"], ["barrel"]))
    (addon / "materials" / "models" / "props" / "crate.vmt").write_text('"VertexLitGeneric" {}', encoding="utf-8")
    (addon / "materials" / "models" / "props" / "crate.vtf").write_bytes(b"dummy_vtf")
    (addon / "materials" / "models" / "props" / "barrel.vtf").write_bytes(b"dummy_vtf")
    (addon / "lua" / "autorun" / "crates.lua").write_text("-- demo\n", encoding="utf-8")
    (addon / "sound" / "crate_break.wav").write_bytes(b"dummy_wav")

    (root / "props_pack" / "models.json").write_text(json.dumps(["models/props/crate.mdl"]), encoding="utf-8")

    config = {
        "input_folder": str(root),
        "output_folder": "demo_drop/build",
        "ignored_addon_packs": [],
        "model_whitelist": True,
    }
    Path("demo_drop/config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")

    print(f"Created demo drop at: {root.resolve()}")
    print("Run: addonpacker --config demo_drop/config.json")


if __name__ == "__main__":
    main()
