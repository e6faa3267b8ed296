"""gothrow — rewrites Go code that discards errors with `_` into checked errors."""

from .api import (  # noqa: F401
    rewrite_source,
    rewrite_project,
    rewrite_unit,
)
from .rewrite_types import RewriteConfig  # noqa: F401
