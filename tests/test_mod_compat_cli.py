import json
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import mod_compat
from modcompat import Compatibility, CompatibilityResolver, CompatibilityState, ModDefinition
from modcompat.report import generate_compatibility_report


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = Path(self.tmp.name)
        self.base = self.root / "mod-installer"
        version_file = self.root / "tld_Data" / "StreamingAssets" / "version.txt"
        version_file.parent.mkdir(parents=True)
        version_file.write_text("2.5\n")
        self.base.mkdir()
        (self.base / "compatibility-state.json").write_text(json.dumps({
            "compatibilityVersions": [
                {"version": "1.0", "effectiveFrom": "2020-01-01T00:00:00+00:00"},
                {"version": "2.0", "effectiveFrom": "2021-01-01T00:00:00+00:00"},
            ],
            "etag": None,
            "checked": None,
        }))
        self.mods = self.root / "mods.json"
        self.mods.write_text(json.dumps([
            {"name": "Fresh", "version": "1.2", "compatibleWith": "2.1", "releaseDate": "2021-02-01"},
            {"name": "Stale", "version": "0.9", "releaseDate": "2020-03-01T00:00:00Z"},
        ]))

    def test_offline_check_writes_report(self):
        report = self.root / "report.md"
        code = mod_compat.main(["--base-dir", str(self.base), "--mods", str(self.mods),
                                "--report", str(report), "--offline"])
        self.assertEqual(code, 0)
        content = report.read_text()
        self.assertIn("- Installed Version: 2.5", content)
        self.assertIn("- Compatibility Epoch: 2.0", content)
        self.assertIn("## Compatible Mods\n- Fresh 1.2 (compatible with 2.1)", content)
        self.assertIn("## Outdated Mods\n- Stale 0.9 (released 2020-03-01)", content)

    def test_missing_version_file_exits_with_error(self):
        code = mod_compat.main(["--base-dir", str(self.root / "elsewhere" / "tool"), "--offline"])
        self.assertEqual(code, 1)

    def test_bad_manifest_exits_with_error(self):
        self.mods.write_text(json.dumps({"name": "not a list"}))
        code = mod_compat.main(["--base-dir", str(self.base), "--mods", str(self.mods), "--offline"])
        self.assertEqual(code, 1)

    def test_non_string_declared_version_exits_with_error(self):
        self.mods.write_text(json.dumps([{"name": "Numeric", "compatibleWith": 1.5, "releaseDate": "2021-02-01"}]))
        code = mod_compat.main(["--base-dir", str(self.base), "--mods", str(self.mods), "--offline"])
        self.assertEqual(code, 1)

    def test_online_check_uses_refresh(self):
        with patch.object(CompatibilityResolver, "refresh") as refresh:
            code = mod_compat.main(["--base-dir", str(self.base)])
        self.assertEqual(code, 0)
        refresh.assert_called_once_with()


class TestReport(unittest.TestCase):
    def test_unknown_section_when_epoch_missing(self):
        m = ModDefinition("Thing", "1.0", datetime(2020, 1, 1, tzinfo=timezone.utc))
        content = generate_compatibility_report("unknown", CompatibilityState(), None, [(m, Compatibility.UNKNOWN)])
        self.assertIn("- Compatibility Epoch: unknown", content)
        self.assertIn("- Epoch Table Last Checked: never", content)
        self.assertIn("## Unknown Compatibility\n- Thing 1.0 (released 2020-01-01)", content)
        self.assertNotIn("## Compatibility Epochs", content)


if __name__ == '__main__':
    unittest.main()
