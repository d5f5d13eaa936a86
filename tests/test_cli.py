import io
import json
import runpy
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from addonpacker.cli import main
from addonpacker.config import APP_VERSION


class TestCli(unittest.TestCase):
    def test_run_from_config_file(self):
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            src = base / "in" / "pack" / "addon" / "sounds" / "hit.wav"
            src.parent.mkdir(parents=True)
            src.write_bytes(b"wav")
            (base / "in" / "skip" / "addon").mkdir(parents=True)

            cfg = base / "config.json"
            cfg.write_text(json.dumps({
                "input_folder": str(base / "in"),
                "output_folder": str(base / "out"),
                "ignored_addon_packs": ["skip"],
                "model_whitelist": False,
            }), encoding="utf-8")

            buf = io.StringIO()
            with redirect_stdout(buf):
                code = main(["--config", str(cfg), "--manifest", str(base / "summary.json")])

            self.assertEqual(code, 0)
            self.assertTrue((base / "out" / "pack" / "sounds" / "hit.wav").exists())
            self.assertFalse((base / "out" / "skip").exists())
            self.assertIn('processing "pack":', buf.getvalue())
            self.assertIn("- addon", buf.getvalue())
            self.assertIn("total size - 0.00 MB", buf.getvalue())
            self.assertTrue((base / "summary.json").exists())

    def test_overrides_without_config(self):
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            (base / "in" / "pack" / "addon" / "lua").mkdir(parents=True)
            (base / "in" / "pack" / "addon" / "lua" / "init.lua").write_text("x")

            with redirect_stdout(io.StringIO()):
                code = main([
                    "--config", str(base / "missing.json"),
                    "--input", str(base / "in"),
                    "--output", str(base / "out"),
                    "--whitelist",
                ])

            self.assertEqual(code, 0)
            self.assertTrue((base / "out" / "_lua" / "addon" / "lua" / "init.lua").exists())
            self.assertTrue((base / "out" / "_lua_merged" / "pack" / "lua" / "init.lua").exists())

    def test_runs_as_module(self):
        buf = io.StringIO()
        with mock.patch.object(sys, "argv", ["addonpacker", "--version"]), redirect_stdout(buf):
            with self.assertRaises(SystemExit) as ctx:
                runpy.run_module("addonpacker", run_name="__main__")
        self.assertEqual(ctx.exception.code, 0)
        self.assertIn(APP_VERSION, buf.getvalue())

    def test_error_exit_code(self):
        with tempfile.TemporaryDirectory() as td:
            err = io.StringIO()
            with redirect_stderr(err), redirect_stdout(io.StringIO()):
                code = main(["--config", str(Path(td) / "missing.json")])
            self.assertEqual(code, 1)
            self.assertIn("error:", err.getvalue())


if __name__ == "__main__":
    unittest.main()
