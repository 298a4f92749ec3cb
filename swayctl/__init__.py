"""swayctl - client for sway/i3 style control binaries.

This package provides:
- Control socket discovery with session, surface and process fallbacks
- Batched command dispatch with per-sub-command status reporting
- Window/workspace tree model with window enumeration
- A small CLI (``swayctl``) on top of the client
"""

__version__ = "0.1.0"
__author__ = "swayctl contributors"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
