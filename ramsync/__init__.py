"""RAM disk content synchronization.

Mirrors the contents of RAM-backed volumes to a durable sync folder
with rsync, and restores them from it.
"""

__version__ = "0.1.0"
