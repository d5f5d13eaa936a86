import tempfile
import unittest
from pathlib import Path

from addonpacker.core.scanner import build_file_entry, list_addon_packs, list_addons, walk_addon
from addonpacker.errors import FilesystemError


def touch(path: Path, data: bytes = b"x"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class TestScanner(unittest.TestCase):
    def test_list_addon_packs_skips_ignored_and_files(self):
        with tempfile.TemporaryDirectory() as td:
            root = Path(td)
            for name in ("zeta", "alpha", "skipme"):
                (root / name).mkdir()
            touch(root / "readme.txt")

            packs = list_addon_packs(str(root), {"skipme"})
            self.assertEqual(packs, ["alpha", "zeta"])

    def test_list_addon_packs_missing_root(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FilesystemError):
                list_addon_packs(str(Path(td) / "nope"))

    def test_list_addons(self):
        with tempfile.TemporaryDirectory() as td:
            pack = Path(td) / "pack"
            (pack / "b_addon").mkdir(parents=True)
            (pack / "a_addon").mkdir()
            touch(pack / "models.json", b"[]")

            self.assertEqual(list_addons(pack), ["a_addon", "b_addon"])
            self.assertEqual(list_addons(Path(td) / "missing"), [])

    def test_walk_visits_models_first(self):
        with tempfile.TemporaryDirectory() as td:
            addon = Path(td) / "addon"
            touch(addon / "addon.json")
            touch(addon / "lua" / "autorun" / "init.lua")
            touch(addon / "materials" / "foo" / "bar.vmt")
            touch(addon / "models" / "foo" / "bar.mdl")
            touch(addon / "models" / "aaa.mdl")
            touch(addon / "sounds" / "hit.wav")
            # nested "models" folder also goes first among its siblings
            touch(addon / "materials" / "models" / "crate.vtf")

            rel = [str(p.relative_to(addon)).replace("\\", "/") for p in walk_addon(addon)]
            self.assertEqual(
                rel,
                [
                    "models/aaa.mdl",
                    "models/foo/bar.mdl",
                    "addon.json",
                    "lua/autorun/init.lua",
                    "materials/models/crate.vtf",
                    "materials/foo/bar.vmt",
                    "sounds/hit.wav",
                ],
            )

    def test_build_file_entry(self):
        addon = Path("/in/pack/addon")
        e = build_file_entry(addon / "materials" / "Foo" / "Bar.VMT", addon)
        self.assertEqual(e.relpath, "materials/Foo/Bar.VMT")
        self.assertEqual(e.key, "materials/foo/bar.vmt")
        self.assertEqual(e.category, "materials")
        self.assertEqual(e.stem, "Bar")
        self.assertEqual(e.ext, "vmt")

        vtx = build_file_entry(addon / "models" / "crate.dx90.vtx", addon)
        self.assertEqual(vtx.category, "models")
        self.assertEqual(vtx.stem, "crate")
        self.assertEqual(vtx.ext, "vtx")

        dotted = build_file_entry(addon / "models" / "props.v2.mdl", addon)
        self.assertEqual(dotted.stem, "props.v2")
        self.assertEqual(build_file_entry(addon / "models" / "props.v2.sw.vtx", addon).stem, "props.v2")
        self.assertEqual(build_file_entry(addon / "models" / "crate.lod1.vvd", addon).stem, "crate.lod1")

        top = build_file_entry(addon / "addon.json", addon)
        self.assertEqual(top.category, "")
        self.assertEqual(top.relpath, "addon.json")


if __name__ == "__main__":
    unittest.main()
