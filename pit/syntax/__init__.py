# -*- coding: utf-8 -*-
"""pit.syntax: write pattern-guarded stages as code.

Requires `mcpyrate`.

Usage::

    from pit.syntax import macros, pat  # noqa: F401
    from pit import pit, stage
    from unpythonic import pipe1

    response = ("ok", {"data": {"count": 10}, "errors": []})
    pipe1(response,
          stage(pat[data << ("ok", {"errors": [], "data": data})]),
          stage(pat[count * 2 << {"count": count}]))  # --> 20
"""

# This module only re-exports the macro interfaces so the macros can be imported
# by `from pit.syntax import macros, ...`.

from .patsyntax import *  # noqa: F401, F403
