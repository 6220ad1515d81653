"""
Commit Splitter

Interactively carve the files of recent commits into smaller, grouped commits.
"""

__version__ = "1.0.0"

# Default number of commits to split when neither the CLI, GSPLIT_DEPTH
# nor .gsplitrc says otherwise. 0 means the uncommitted working tree.
DEFAULT_DEPTH = 1
