"""CLI commands"""

from . import tag
from . import upload
from . import deploy
from . import snippet

__all__ = [
    "tag",
    "upload",
    "deploy",
    "snippet",
]
