"""Tests for conf – last-command persistence."""

import json
import os
import tempfile
import unittest
from unittest.mock import patch

from glight.conf import (
    clear_last_command,
    get_last_command,
    load_config,
    save_config,
    save_last_command,
)
from glight.core.models import Breathe, ColorSector, Cycle, RgbColor, Speed


class TestConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = os.path.join(self._tmp.name, 'glight')
        self.config_path = os.path.join(self.config_dir, 'config.json')
        patchers = [
            patch('glight.conf.CONFIG_DIR', self.config_dir),
            patch('glight.conf.CONFIG_PATH', self.config_path),
        ]
        for p in patchers:
            p.start()
            self.addCleanup(p.stop)
        self.addCleanup(self._tmp.cleanup)

    def _write(self, text):
        os.makedirs(self.config_dir, exist_ok=True)
        with open(self.config_path, 'w') as f:
            f.write(text)

    def test_missing_file(self):
        self.assertEqual(load_config(), {})

    def test_corrupt_file(self):
        self._write("{not json")
        self.assertEqual(load_config(), {})

    def test_non_dict_file(self):
        self._write("[1, 2]")
        self.assertEqual(load_config(), {})

    def test_save_creates_directory(self):
        save_config({'a': 1})
        with open(self.config_path) as f:
            self.assertEqual(json.load(f), {'a': 1})

    def test_last_command_per_model(self):
        save_last_command("G213", Breathe(RgbColor(0, 255, 0), Speed(100)))
        save_last_command("G815", Cycle(Speed(5000)))

        self.assertEqual(get_last_command("G213"), Breathe(RgbColor(0, 255, 0), Speed(100)))
        self.assertEqual(get_last_command("G815"), Cycle(Speed(5000)))
        self.assertEqual(load_config()['devices']['G213'],
                         {'type': 'breathe', 'color': '00ff00', 'speed': 100})

    def test_overwrite(self):
        save_last_command("G213", Cycle(Speed(5000)))
        save_last_command("G213", ColorSector(RgbColor(255, 0, 0), 2))
        self.assertEqual(get_last_command("G213"), ColorSector(RgbColor(255, 0, 0), 2))

    def test_keeps_other_keys(self):
        save_config({'other': True})
        save_last_command("G213", Cycle(Speed(5000)))
        self.assertTrue(load_config()['other'])

    def test_unset(self):
        self.assertIsNone(get_last_command("G213"))

    def test_unreadable_entry(self):
        save_config({'devices': {'G213': {'type': 'rainbow'}}})
        with self.assertLogs('glight.conf', level='WARNING'):
            self.assertIsNone(get_last_command("G213"))

    def test_entries_with_wrong_types_are_ignored(self):
        for entry in [{'type': 'color', 'color': 123},
                      {'type': 'color', 'color': 'ff0000', 'sector': '2'},
                      {'type': 'breathe', 'color': '00ff00', 'speed': 50.0},
                      "cycle"]:
            with self.subTest(entry=entry):
                save_config({'devices': {'G213': entry}})
                with self.assertLogs('glight.conf', level='WARNING'):
                    self.assertIsNone(get_last_command("G213"))

    def test_malformed_devices_section(self):
        save_config({'devices': []})
        with self.assertLogs('glight.conf', level='WARNING'):
            self.assertIsNone(get_last_command("G213"))
        with self.assertLogs('glight.conf', level='WARNING'):
            clear_last_command("G213")
        with self.assertLogs('glight.conf', level='WARNING'):
            save_last_command("G213", Cycle(Speed(5000)))
        self.assertEqual(get_last_command("G213"), Cycle(Speed(5000)))

    def test_clear(self):
        save_last_command("G213", Cycle(Speed(5000)))
        clear_last_command("G213")
        self.assertIsNone(get_last_command("G213"))
        clear_last_command("G213")


if __name__ == '__main__':
    unittest.main()
