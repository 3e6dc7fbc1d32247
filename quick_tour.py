#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Short quick tour of pit. For the macro front-end, see pit.syntax."""

from unpythonic import pipe1, piped1, exitpipe, dyn

from pit import *

# derive: pick the data out of a response, then double its count
response = ("ok", {"data": {"count": 10}, "errors": []})
x = pipe1(response,
          stage(derive(lambda data: data, ("ok", {"errors": [], "data": cap.data}))),
          stage(derive(lambda count: count * 2, {"count": cap.count})))
assert x == 20

# negated: pipe only what isn't an error
x = pipe1(("cool", 22),
          stage_strict(negate(("error", wild))),
          stage(derive(lambda n: n, (wild, cap.n))))
assert x == 22

try:
    pit_strict(("error", "not_found"), negate(("error", wild)))
except MismatchError as err:
    # did not expect piped value to match `('error', _)` but got `('error', 'not_found')`
    assert err.value == ("error", "not_found")

# guards see the captured names
big = as_spec(("ok", cap.n)).when(lambda n: n > 30)
assert pit(("ok", 22), big) == ("ok", 22)  # non-strict: passes through
try:
    pit_strict(("ok", 22), big)
except MismatchError as err:
    assert err.reason == "guard"

# on mismatch: a default value, or an alternate chain
assert pit(("error", "not_found"), ("ok", wild), default=("ok", "default")) == ("ok", "default")
to_int = stage(derive(lambda x: x + 1, {"tag": "error", "value": cap.x}))
assert pit({"tag": "error", "value": 22}, derive(lambda n: n, {"tag": "ok", "value": cap.n}),
           orelse=to_int) == 23

# `it` just passes the value down
assert pit(("error", 22), ("ok", wild), orelse=it) == ("error", 22)

# stages are one-argument callables
assert piped1(("ok", 3)) | stage(derive(lambda n: n + 1, ("ok", cap.n))) | exitpipe == 4

# resume from the last good value
x = pitpipe(("error", 404),
            stage_strict(negate(("error", wild))),
            stage(derive(lambda n: n, ("ok", cap.n))),
            recover=True)
assert x == ("error", 404)

# make every stage strict in a dynamic extent
with dyn.let(pit_strict=True):
    try:
        pit(("error", 1), ("ok", wild))
    except MismatchError:
        pass
