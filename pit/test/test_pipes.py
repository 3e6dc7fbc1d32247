# -*- coding: utf-8 -*-

from unpythonic.syntax import macros, test, test_raises  # noqa: F401
from unpythonic.test.fixtures import session, testset

from ..mismatch import MismatchError
from ..patterns import cap, wild
from ..pipes import pitpipe
from ..stages import derive, negate, stage, stage_strict

def runtests():
    with testset("pitpipe"):
        double_count = stage(derive(lambda count: count * 2, {"count": cap.count}))
        test[pitpipe({"count": 10}, double_count) == 20]
        test[pitpipe(42) == 42]  # no stages
        test[pitpipe(("ok", 1), stage(derive(lambda n: n, ("ok", cap.n))), str) == "1"]

    with testset("terminal catch-and-unwrap"):
        stages = (stage_strict(negate(("error", wild))),
                  stage(derive(lambda n: n, ("ok", cap.n))),
                  stage_strict(derive(lambda n: n + 1, cap.n, when=lambda n: isinstance(n, int))))
        test[pitpipe(("ok", 1), *stages, recover=True) == 2]
        # recover resumes from the value that failed to match
        test[pitpipe(("error", 404), *stages, recover=True) == ("error", 404)]
        test[pitpipe(("ok", "one"), *stages, recover=True) == "one"]
        test_raises[MismatchError, pitpipe(("error", 404), *stages)]

    with testset("only mismatches are recovered"):
        def boom(x):
            raise RuntimeError("boom")
        test_raises[RuntimeError, pitpipe(1, boom, recover=True)]

if __name__ == '__main__':  # pragma: no cover
    with session(__file__):
        runtests()
