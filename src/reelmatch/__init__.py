"""
reelmatch - library reference disambiguation.

Resolves loosely identified media references against a catalog snapshot
with a fixed-priority strategy chain, and runs batches through a
cancellable worker pool that persists outcomes and streams progress.
"""

from reelmatch.shared.constants import Application

__version__ = Application.VERSION
__author__ = "reelmatch Team"

__all__ = ["__version__"]
