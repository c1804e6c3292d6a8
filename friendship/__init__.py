"""
Friendship API core.

Users, directed friendship edges, and friend-degree resolution.
"""

__version__ = "1.0.0"
