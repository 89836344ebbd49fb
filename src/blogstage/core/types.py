"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/categories/note/front-end")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Normalized category path, root first (e.g., ["Notes", "Frontend"])
CategoryPath = list[str]
