"""mgmtctl — orchestration core for a management console.

Edits a remote server's hierarchical configuration tree through
address-scoped operations and keeps dependent views refreshed.
"""

__version__ = "0.4.0"
