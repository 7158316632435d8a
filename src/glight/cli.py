#!/usr/bin/env python3
"""
glight - Command Line Interface

Entry point for the glight package.
"""

import argparse
import logging
import sys
from typing import Callable, List, Optional

from .__version__ import __version__
from .core.models import Breathe, ColorSector, Command, Cycle, RgbColor, Speed
from .device_base import DeviceModel
from .errors import GlightError

log = logging.getLogger(__name__)

# Builds the command for one model (the default color is per model)
CommandFactory = Callable[[DeviceModel], Command]


def _setup_logging(verbose=0):
    """Configure root logging from the -v count."""
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format='[%(levelname)s] %(name)s: %(message)s')
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='[%(levelname)s] %(message)s')
    # pyusb's backend chatter is only useful when debugging pyusb itself
    logging.getLogger('usb').setLevel(logging.WARNING)


def _add_model_option(parser):
    parser.add_argument("--model", "-m", help="Only address this model (e.g. G213)")
    parser.add_argument("--no-save", action="store_true",
                        help="Do not remember this command for 'glight refresh'")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="glight",
        description="Lighting control for Logitech G-series RGB keyboards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    glight list                         Show connected keyboards
    glight color ff0000                 Whole keyboard red
    glight color 00ff00 --sector 2      Middle sector green
    glight breathe 0000ff --speed 2000  Breathe blue
    glight cycle --speed 5000           Cycle through all colors
    glight refresh                      Re-apply the last saved command
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # List command
    subparsers.add_parser("list", help="List supported models and connected keyboards")

    # Color command
    color_parser = subparsers.add_parser("color", help="Set a static color")
    color_parser.add_argument("hex", nargs="?", help="Hex color (e.g. ff0000); default: model white")
    color_parser.add_argument("--sector", "-s", type=int, help="Sector index (default: all sectors)")
    _add_model_option(color_parser)

    # Breathe command
    breathe_parser = subparsers.add_parser("breathe", help="Breathe a single color")
    breathe_parser.add_argument("hex", nargs="?", help="Hex color (e.g. ff0000); default: model white")
    breathe_parser.add_argument("--speed", "-t", type=int, required=True,
                                help="Effect speed (>= 32, larger is slower)")
    _add_model_option(breathe_parser)

    # Cycle command
    cycle_parser = subparsers.add_parser("cycle", help="Cycle through the color wheel")
    cycle_parser.add_argument("--speed", "-t", type=int, required=True,
                              help="Effect speed (>= 32, larger is slower)")
    _add_model_option(cycle_parser)

    # Refresh command
    refresh_parser = subparsers.add_parser("refresh", help="Re-send the saved command to each keyboard")
    refresh_parser.add_argument("--model", "-m", help="Only refresh this model")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _setup_logging(args.verbose)

    if args.command == "list":
        return list_devices()
    elif args.command == "color":
        return send_color(args.hex, sector=args.sector, model=args.model, save=not args.no_save)
    elif args.command == "breathe":
        return send_breathe(args.hex, args.speed, model=args.model, save=not args.no_save)
    elif args.command == "cycle":
        return send_cycle(args.speed, model=args.model, save=not args.no_save)
    elif args.command == "refresh":
        return refresh(model=args.model)

    return 0


def _select_models(model: Optional[str]) -> List[DeviceModel]:
    from .device_detector import SUPPORTED_MODELS, get_model
    if model:
        return [get_model(model)]
    return list(SUPPORTED_MODELS)


def _color_or_default(hex_color: Optional[str]) -> Callable[[DeviceModel], RgbColor]:
    if hex_color is None:
        return lambda m: m.get_default_color()
    color = RgbColor.from_hex(hex_color)
    return lambda m: color


def _send_to_models(factory: CommandFactory, model: Optional[str] = None,
                    save: bool = True) -> int:
    """Send factory(model) to every connected keyboard of the selected models."""
    from .conf import save_last_command

    sent = 0
    failed = 0
    for m in _select_models(model):
        command = factory(m)
        model_sent = 0
        for device in m.find():
            with device:
                try:
                    device.send_command(command)
                except GlightError as e:
                    print(f"Error: {device.get_debug_info()}: {e}")
                    failed += 1
                    continue
            print(f"Sent {command_summary(command)} to {m.get_name()}")
            model_sent += 1
        if save and model_sent:
            try:
                save_last_command(m.get_name(), command)
            except OSError as e:
                log.warning("Could not save last command for %s: %s", m.get_name(), e)
        sent += model_sent

    if sent == 0 and failed == 0:
        print("No supported keyboard detected.")
        return 1
    return 1 if failed else 0


def command_summary(command: Command) -> str:
    """One-line human description of *command*."""
    if isinstance(command, ColorSector):
        where = "all sectors" if command.sector is None else f"sector {command.sector}"
        return f"color {command.color} ({where})"
    if isinstance(command, Breathe):
        return f"breathe {command.color} (speed {command.speed.value})"
    if isinstance(command, Cycle):
        return f"cycle (speed {command.speed.value})"
    return repr(command)


def list_devices():
    """List supported models and the keyboards currently connected."""
    try:
        from .device_detector import SUPPORTED_MODELS, find_all_devices

        print("Supported models:")
        for m in SUPPORTED_MODELS:
            print(f"  {m.get_name():<8} {m.info.identity}  "
                  f"{m.get_sectors()} sectors, default color {m.get_default_color()}")

        devices = find_all_devices()
        if not devices:
            print("\nNo supported keyboard detected.")
            return 1

        try:
            print("\nConnected:")
            for i, dev in enumerate(devices, 1):
                print(f"  [{i}] {dev.get_debug_info()}")
        finally:
            for dev in devices:
                dev.close()
        return 0
    except Exception as e:
        print(f"Error: {e}")
        return 1


def send_color(hex_color=None, sector=None, model=None, save=True):
    """Set a static color on every connected keyboard."""
    try:
        color_for = _color_or_default(hex_color)
        return _send_to_models(lambda m: ColorSector(color_for(m), sector), model, save)
    except (GlightError, ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1


def send_breathe(hex_color, speed, model=None, save=True):
    """Start the breathe effect on every connected keyboard."""
    try:
        color_for = _color_or_default(hex_color)
        return _send_to_models(lambda m: Breathe(color_for(m), Speed(speed)), model, save)
    except (GlightError, ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1


def send_cycle(speed, model=None, save=True):
    """Start the color cycle effect on every connected keyboard."""
    try:
        return _send_to_models(lambda m: Cycle(Speed(speed)), model, save)
    except (GlightError, ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1


def refresh(model=None):
    """Re-send each model's saved command to its connected keyboards."""
    try:
        from .conf import get_last_command

        status = 0
        restored = 0
        for m in _select_models(model):
            command = get_last_command(m.get_name())
            if command is None:
                log.debug("No saved command for %s", m.get_name())
                continue
            restored += 1
            if _send_to_models(lambda _m: command, m.get_name(), save=False):
                status = 1

        if restored == 0:
            print("No saved lighting to restore.")
            return 1
        return status
    except (GlightError, KeyError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
