"""
xartool CLI Commands
Contains the executable modules for verifying, inspecting and unpacking archives.
"""

from . import verify
from . import inspect
from . import unpack
from . import verify_batch

__all__ = ["verify", "inspect", "unpack", "verify_batch"]
