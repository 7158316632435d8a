"""Tests for core/models.py – colors, speeds, commands, identities."""

import unittest

from glight.core.models import (
    MAX_SPEED,
    MIN_SPEED,
    Breathe,
    ColorSector,
    Command,
    Cycle,
    DeviceIdentity,
    RgbColor,
    Speed,
    check_speed,
    command_from_dict,
    command_to_dict,
)
from glight.errors import GlightError, InvalidArgumentError

# =============================================================================
# RgbColor
# =============================================================================


class TestRgbColor(unittest.TestCase):

    def test_channels(self):
        c = RgbColor(1, 2, 3)
        self.assertEqual((c.red, c.green, c.blue), (1, 2, 3))

    def test_channel_out_of_range(self):
        for args in [(256, 0, 0), (0, -1, 0), (0, 0, 300)]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidArgumentError):
                    RgbColor(*args)

    def test_channel_must_be_int(self):
        for args in [(1.0, 0, 0), (0, True, 0), (0, 0, "7")]:
            with self.subTest(args=args):
                with self.assertRaises(InvalidArgumentError):
                    RgbColor(*args)

    def test_from_hex(self):
        self.assertEqual(RgbColor.from_hex("ffb4aa"), RgbColor(0xFF, 0xB4, 0xAA))
        self.assertEqual(RgbColor.from_hex("#00FF00"), RgbColor(0, 255, 0))
        self.assertEqual(RgbColor.from_hex("  0000ff "), RgbColor(0, 0, 255))

    def test_from_hex_rejects_bad_input(self):
        for text in ["", "fff", "ff00ff00", "zzzzzz", "#12345"]:
            with self.subTest(text=text):
                with self.assertRaises(InvalidArgumentError) as ctx:
                    RgbColor.from_hex(text)
                self.assertEqual(ctx.exception.field, "color")

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            RgbColor.from_hex("nope")
        self.assertTrue(issubclass(InvalidArgumentError, GlightError))

    def test_int_conversion(self):
        c = RgbColor.from_int(0x123456)
        self.assertEqual(c, RgbColor(0x12, 0x34, 0x56))
        self.assertEqual(c.to_int(), 0x123456)

    def test_to_hex_and_bytes(self):
        c = RgbColor(255, 0, 10)
        self.assertEqual(c.to_hex(), "ff000a")
        self.assertEqual(c.to_bytes(), b'\xff\x00\x0a')
        self.assertEqual(str(c), "#ff000a")

    def test_frozen(self):
        c = RgbColor(0, 0, 0)
        with self.assertRaises(AttributeError):
            c.red = 1


# =============================================================================
# Speed
# =============================================================================


class TestSpeed(unittest.TestCase):

    def test_range(self):
        Speed(0)
        Speed(MAX_SPEED)
        with self.assertRaises(InvalidArgumentError):
            Speed(MAX_SPEED + 1)
        with self.assertRaises(InvalidArgumentError):
            Speed(-1)

    def test_must_be_int(self):
        for value in [50.0, True, "100", None]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidArgumentError) as ctx:
                    Speed(value)
                self.assertEqual(ctx.exception.field, "speed")

    def test_check_speed_minimum(self):
        check_speed(Speed(MIN_SPEED))
        with self.assertRaises(InvalidArgumentError) as ctx:
            check_speed(Speed(MIN_SPEED - 1))
        self.assertEqual(ctx.exception.field, "speed")
        self.assertEqual(ctx.exception.value, 31)
        self.assertIn("31 < 32", str(ctx.exception))


# =============================================================================
# DeviceIdentity
# =============================================================================


class TestDeviceIdentity(unittest.TestCase):

    def test_str(self):
        self.assertEqual(str(DeviceIdentity(0x046D, 0xC336)), "046d:c336")

    def test_hashable(self):
        a = DeviceIdentity(0x046D, 0xC336)
        self.assertEqual({a: 1}[DeviceIdentity(0x046D, 0xC336)], 1)

    def test_rejects_wide_ids(self):
        with self.assertRaises(InvalidArgumentError):
            DeviceIdentity(0x10000, 1)


# =============================================================================
# Command serialization
# =============================================================================


class TestCommandDict(unittest.TestCase):

    def test_color_all_sectors(self):
        d = command_to_dict(ColorSector(RgbColor(255, 0, 0)))
        self.assertEqual(d, {'type': 'color', 'color': 'ff0000', 'sector': None})

    def test_breathe(self):
        d = command_to_dict(Breathe(RgbColor(0, 255, 0), Speed(100)))
        self.assertEqual(d, {'type': 'breathe', 'color': '00ff00', 'speed': 100})

    def test_restores_each_kind(self):
        for cmd in [ColorSector(RgbColor(1, 2, 3), 4),
                    Breathe(RgbColor(0, 0, 255), Speed(2000)),
                    Cycle(Speed(5000))]:
            with self.subTest(cmd=cmd):
                self.assertEqual(command_from_dict(command_to_dict(cmd)), cmd)

    def test_unknown_command_to_dict(self):
        with self.assertRaises(TypeError):
            command_to_dict(Command())

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            command_from_dict({'type': 'rainbow'})

    def test_malformed(self):
        for data in [{'type': 'cycle'},
                     {'type': 'breathe', 'color': 'ff0000', 'speed': None},
                     {'type': 'color', 'color': 'xyz'},
                     {'type': 'color', 'color': 123},
                     {'type': 'color', 'color': 'ff0000', 'sector': '2'},
                     {'type': 'color', 'color': 'ff0000', 'sector': True},
                     {'type': 'breathe', 'color': None, 'speed': 100},
                     {'type': 'breathe', 'color': 'ff0000', 'speed': 50.0},
                     {'type': 'cycle', 'speed': '5000'},
                     ['cycle']]:
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    command_from_dict(data)


if __name__ == '__main__':
    unittest.main()
