import unittest
from pathlib import Path

from addonpacker.core.planner import resolve_placement
from addonpacker.core.scanner import build_file_entry
from addonpacker.core.whitelist import add_materials
from addonpacker.models import AddonPack

ADDON = Path("/in/packA/addon1")
OUT = Path("/out")


def entry(relpath: str):
    return build_file_entry(ADDON / relpath, ADDON)


class TestPlanner(unittest.TestCase):
    def setUp(self):
        self.open_pack = AddonPack(name="packA", path=ADDON.parent)
        self.filtered = AddonPack(name="packA", path=ADDON.parent, whitelist=True, used_models={"crate"})

    def test_unfiltered_keeps_everything(self):
        for rel in ("models/barrel.mdl", "materials/x/y.vtf", "sounds/a.wav", "addon.json"):
            with self.subTest(rel=rel):
                p = resolve_placement(entry(rel), self.open_pack, "addon1", str(OUT))
                self.assertTrue(p.keep)
                self.assertFalse(p.decode)
                self.assertTrue(p.counted)
                self.assertEqual(p.destinations, [str(OUT / "packA" / Path(rel))])

    def test_whitelisted_model_is_decoded(self):
        p = resolve_placement(entry("models/props/crate.mdl"), self.filtered, "addon1", str(OUT))
        self.assertTrue(p.keep)
        self.assertTrue(p.decode)
        self.assertEqual(p.destinations, [str(OUT / "packA" / "models" / "props" / "crate.mdl")])

        # companion files are kept but not decoded
        vtx = resolve_placement(entry("models/props/crate.dx90.vtx"), self.filtered, "addon1", str(OUT))
        self.assertTrue(vtx.keep)
        self.assertFalse(vtx.decode)

    def test_unlisted_model_dropped(self):
        p = resolve_placement(entry("models/props/barrel.mdl"), self.filtered, "addon1", str(OUT))
        self.assertFalse(p.keep)
        self.assertEqual(p.destinations, [])

    def test_material_needs_prior_decode(self):
        e = entry("materials/Props/Crate.vtf")
        self.assertFalse(resolve_placement(e, self.filtered, "addon1", str(OUT)).keep)

        add_materials(self.filtered, ["materials/props/crate.vtf"])
        p = resolve_placement(e, self.filtered, "addon1", str(OUT))
        self.assertTrue(p.keep)
        self.assertEqual(p.destinations, [str(OUT / "packA" / "materials" / "Props" / "Crate.vtf")])

    def test_lua_goes_to_both_staging_areas(self):
        p = resolve_placement(entry("lua/autorun/init.lua"), self.filtered, "addon1", str(OUT))
        self.assertTrue(p.keep)
        self.assertFalse(p.counted)
        self.assertEqual(
            p.destinations,
            [
                str(OUT / "_lua" / "addon1" / "lua" / "autorun" / "init.lua"),
                str(OUT / "_lua_merged" / "packA" / "lua" / "autorun" / "init.lua"),
            ],
        )

    def test_other_categories_always_kept(self):
        p = resolve_placement(entry("sounds/hit.wav"), self.filtered, "addon1", str(OUT))
        self.assertTrue(p.keep)
        self.assertEqual(p.destinations, [str(OUT / "packA" / "sounds" / "hit.wav")])


if __name__ == "__main__":
    unittest.main()
