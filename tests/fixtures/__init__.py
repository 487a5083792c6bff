"""Shared pytest fixtures."""

from .api import *  # noqa: F401,F403
from .commerce import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
