# -*- coding: utf-8 -*-
"""Tests for the pat[] macro."""

from unpythonic.syntax import macros, test, test_raises, the  # noqa: F401
from ...syntax import macros, pat  # noqa: F401, F811
from unpythonic.test.fixtures import session, testset

from enum import Enum

from unpythonic import pipe1

from ...mismatch import MismatchError
from ...patterns import Capture, Seq, Record, Or
from ...stages import StageSpec, it, pit, pit_strict, stage, stage_strict

class Color(Enum):
    RED = 1
    GREEN = 2

class Point:
    __match_args__ = ("x", "y")
    def __init__(self, x, y):
        self.x = x
        self.y = y

def mismatch_of(thunk):
    try:
        thunk()
    except MismatchError as err:
        return err
    return None

def runtests():
    with testset("pat[] builds a StageSpec"):
        spec = pat[("ok", n)]
        test[isinstance(spec, StageSpec)]
        test[type(spec.pattern) is Seq]
        test[spec.transform is None]
        test[spec.guard is None]
        test[not spec.negated]
        spec = pat[x]
        test[type(spec.pattern) is Capture]
        spec = pat[n * 2 << {"count": n}]
        test[type(spec.pattern) is Record]
        test[spec.transform(n=21) == 42]
        spec = pat[not ("error", _)]
        test[spec.negated]
        spec = pat[~("error", _)]
        test[spec.negated]

    with testset("double the count"):
        response = ("ok", {"data": {"count": 10}, "errors": []})
        test[pipe1(response,
                   stage(pat[data << ("ok", {"errors": [], "data": data})]),
                   stage(pat[count * 2 << {"count": count}])) == 20]

    with testset("pipe only what is not an error"):
        skip_errors = stage_strict(pat[not ("error", _)])
        second = stage(pat[n << (_, n)])
        test[pipe1(("cool", 22), skip_errors, second) == 22]
        err = mismatch_of(lambda: pipe1(("error", "not_found"), skip_errors, stage(pat[n << ("ok", n)])))
        test[err is not None]
        test[the[str(err)].startswith("did not expect piped value to match `")]
        test[the[str(err)].endswith("but got `('error', 'not_found')`")]
        test[err.value == ("error", "not_found")]

    with testset("failing guard"):
        spec = pat[("ok", n), when(n > 30)]
        test[pit(("ok", 42), spec) == ("ok", 42)]
        test[pit(("ok", 22), spec) == ("ok", 22)]
        err = mismatch_of(lambda: pit_strict(("ok", 22), spec))
        test[err is not None]
        test[the[err.message].startswith("expected piped value to match `")]
        test["when" in the[err.pattern] and "n > 30" in err.pattern]
        test["but got `('ok', 22)`" in err.message]
        test[err.reason == "guard"]

        spec = pat[n * 2 << {"tag": "ok", "value": n}, when(isinstance(n, int))]
        test[pit({"tag": "ok", "value": 11}, spec) == 22]
        test[pit({"tag": "ok", "value": "hi"}, spec) == {"tag": "ok", "value": "hi"}]
        err = mismatch_of(lambda: pit_strict({"tag": "ok", "value": "hi"}, spec))
        test["hi" in the[str(err)]]

    with testset("default value"):
        test[pipe1(("error", "not_found"),
                   stage(pat[("ok", _)], default=("ok", "default")),
                   stage(pat[n << ("ok", n)])) == "default"]

    with testset("alternate chain"):
        classify = stage(pat[("ok", n), when(isinstance(n, int))],
                         do=lambda v: ("was_integer", v[1]),
                         orelse=lambda v: pipe1(v,
                                                stage(pat[s << ("ok", s), when(isinstance(s, str))]),
                                                len,
                                                stage(pat[("was_string", length) << length])))
        test[pipe1(("ok", "hello"), classify, stage(pat[x * 2 << (_, x)])) == 10]
        test[pipe1(("ok", 4), classify, stage(pat[x * 2 << (_, x)])) == 8]
        to_int = stage(pat[x + 1 << {"tag": "error", "value": x}])
        test[pit({"tag": "error", "value": 22}, pat[n << {"tag": "ok", "value": n}], orelse=to_int) == 23]

    with testset("it passes the value down"):
        test[pit(("error", 22), pat[("ok", _)], orelse=it) == ("error", 22)]
        test[pit(("ok", 22), pat[("ok", _)], do=it) == ("ok", 22)]

    with testset("transform with several bindings"):
        spec = pat[(n / 11) * m << ("ok", n, m)]
        test[pit(("ok", 22, 2), spec) == 4.0]

    with testset("pattern syntax"):
        test[pit([1, 2, 3], pat[t << [h, *t]]) == [2, 3]]
        test[pit([1, 2, 3], pat[h << [h, *_]]) == 1]
        test[pit({"a": 1, "b": 2}, pat[rest << {"a": 1, **rest}]) == {"b": 2}]
        test[pit(Point(1, 2), pat[x + y << Point(x, y)]) == 3]
        test[pit(Point(1, 2), pat[y << Point(x=1, y=y)]) == 2]
        test[pit(Color.RED, pat[Color.RED], default="no") is Color.RED]
        test[pit(Color.GREEN, pat[Color.RED], default="no") == "no"]
        test[pit(-1, pat[-1], default="no") == -1]
        test[pit(None, pat[None], default="no") is None]
        test[pit((1, 1), pat[x << (x, x)], default="no") == 1]
        test[pit((1, 2), pat[x << (x, x)], default="no") == "no"]
        test[pit(..., pat[...], default="no") is ...]  # `...` is a wildcard

        spec = pat[n << (("ok", n) | ("success", n))]
        test[type(spec.pattern) is Or]
        test[pit(("success", 5), spec) == 5]
        test[pit(("ok", 6), spec) == 6]

        spec = pat[whole << (whole := ("ok", _))]
        test[pit(("ok", 1), spec) == ("ok", 1)]

    with testset("names from the surrounding scope"):
        factor = 3
        spec = pat[n * factor << ("ok", n), when(n > factor)]
        test[pit(("ok", 4), spec) == 12]
        test[pit(("ok", 2), spec) == ("ok", 2)]

if __name__ == '__main__':  # pragma: no cover
    with session(__file__):
        runtests()
