"""Out-of-Office agent - Gmail auto-responder.

This package polls a Gmail inbox, replies once to every new conversation
with an out-of-office notice, and labels answered threads so they are not
processed again.
"""

__version__ = "0.1.0"

from out_of_office.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
