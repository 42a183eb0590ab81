"""Repo Manager - act on a GitHub repository or a collection of repositories.

Repositories are named as ``owner/name`` or ``owner/regex``; a regex is matched
against the whole name of every repository the owner has. Supported batch
operations:
- list repositories and their labels
- create a configured set of labels
- create a milestone
- assign every open, unassigned issue to one user
"""

__version__ = "1.0.0"
