# -*- coding: utf-8 -*
"""Pattern-guarded pipe stages for Python.

Transform a value flowing down a pipe, depending on whether it matches a
structural pattern::

    from pit import pit, derive, cap

    response = ("ok", {"data": {"count": 10}, "errors": []})
    data = pit(response, derive(lambda data: data, ("ok", {"errors": [], "data": cap.data})))
    pit(data, derive(lambda count: count * 2, {"count": cap.count}))  # --> 20

See ``pit.stages`` for the semantics, and ``pit.patterns`` for the patterns.

If you have `mcpyrate` active, see also ``pit.syntax``, which lets you write
the same as ``pat[count * 2 << {"count": count}]``.
"""

__version__ = '0.1.0'

from .mismatch import *  # noqa: F401, F403
from .patterns import *  # noqa: F401, F403
from .pipes import *  # noqa: F401, F403
from .stages import *  # noqa: F401, F403
