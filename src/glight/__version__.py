"""glight version information."""

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.1.0 - Initial release: G213 static color, breathe and cycle over pyusb
# 0.2.0 - Per-sector colors, kernel driver reattached on every exit path,
#         transfer errors carry the failing phase
# 0.3.0 - Model registry, last command saved per model, refresh command
