# -*- coding: utf-8 -*-
"""Run a value through a chain of stages."""

__all__ = ["pitpipe"]

import logging

from unpythonic import pipe1

from .mismatch import MismatchError

logger = logging.getLogger(__name__)

def pitpipe(value, *stages, recover=False):
    """Pipe `value` through `stages`, left to right.

    Each stage is a one-argument callable; typically a `pit.Stage`, but any
    function will do.

    If `recover` is true, and a stage raises `MismatchError`, return the value
    that failed to match. This resumes from the last good value of the chain::

        pitpipe(("error", 404),
                stage_strict(negate(("error", wild))),
                stage(derive(lambda n: n, ("ok", cap.n))),
                recover=True)  # --> ("error", 404)
    """
    if not recover:
        return pipe1(value, *stages)
    try:
        return pipe1(value, *stages)
    except MismatchError as err:
        logger.debug("recovered from mismatch, resuming with %r: %s", err.value, err)
        return err.value
