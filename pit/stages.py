# -*- coding: utf-8 -*-
"""Pattern-guarded pipe stages.

A stage looks at the value piped into it, and decides based on a structural
match what comes out. The basic forms, in order of increasing ambition::

    from pit import pit, derive, negate, cap, wild

    # guard-only: let through values that match, as-is
    pit(("ok", 22), ("ok", wild))                              # --> ("ok", 22)

    # derive: compute the output from the captured bindings
    pit(("ok", 22), derive(lambda n: n * 2, ("ok", cap.n)))    # --> 44

    # negated: let through values that do *not* match
    pit(("cool", 22), negate(("error", wild)))                 # --> ("cool", 22)

    # guarded: the guard sees the captured bindings
    pit(("ok", 22), derive(lambda n: n, ("ok", cap.n), when=lambda n: n > 30))

A value that does not match passes through unchanged, unless the stage says
otherwise. In order of precedence:

  - ``orelse=f``: route the value into an alternate stage (any one-argument
    callable), and output what that returns.
  - ``default=x``: output ``x``.
  - ``strict=True`` (or `pit_strict`): raise `MismatchError`. If the stage has a
    ``tag``, output ``(tag, value)`` instead of raising.

On success, ``do=f`` routes the output through ``f``, and ``do_value=x``
replaces it with ``x``. The sentinel `it` can be given as ``do`` or ``orelse``;
it means "the value itself", i.e. the same as not routing at all.

Stages plug into the function-composition utilities of `unpythonic`::

    from unpythonic import pipe1
    from pit import stage

    pipe1({"data": {"count": 10}, "errors": []},
          stage(derive(lambda data: data, {"errors": [], "data": cap.data})),
          stage(derive(lambda count: count * 2, {"count": cap.count})))  # --> 20

The default strictness of stages that don't specify it is the dynvar
``dyn.pit_strict`` (initially `False`)::

    from unpythonic import dyn

    with dyn.let(pit_strict=True):
        pit(("error", 1), ("ok", wild))  # --> MismatchError
"""

__all__ = ["it", "StageSpec", "as_spec", "derive", "negate",
           "evaluate", "pit", "pit_strict",
           "Stage", "stage", "stage_strict"]

import logging
from inspect import signature, Parameter

from unpythonic import sym, gensym, dyn, make_dynvar

from .mismatch import MismatchError
from .patterns import as_pattern

logger = logging.getLogger(__name__)

# Route sentinel: the value itself.
it = sym("it")

_unset = gensym("unset")

make_dynvar(pit_strict=False)

def _call_with_bindings(f, bindings):
    """Call `f` with the bindings it accepts, passed by name.

    A function with a ``**kwargs`` parameter receives all of them.
    """
    try:
        params = signature(f).parameters
    except (TypeError, ValueError):  # uninspectable, e.g. some builtins
        return f(**bindings)
    if any(p.kind is Parameter.VAR_KEYWORD for p in params.values()):
        return f(**bindings)
    return f(**{k: v for k, v in bindings.items() if k in params})

def _funcname(f):
    return getattr(f, "__name__", repr(f))

def _conjoin(g1, g2):
    def guard(**bindings):
        return _call_with_bindings(g1, bindings) and _call_with_bindings(g2, bindings)
    guard.__name__ = f"{_funcname(g1)} and {_funcname(g2)}"
    return guard

_slots = ("pattern", "guard", "transform", "negated",
          "do", "do_value", "orelse", "default",
          "strict", "tag", "source")
_options = ("do", "do_value", "orelse", "default", "strict", "tag")

class StageSpec:
    """Immutable configuration of one stage.

    `pattern`: `Pattern`, or plain data accepted by `as_pattern`.

    `guard`: callable or `None`. Called with the captured bindings (by name)
             after a successful structural match. Falsy result = mismatch.

    `transform`: callable or `None`. Called with the captured bindings; its
                 return value is the output of the stage on success. If `None`,
                 the output is the piped value itself.

    `negated`: bool. Invert the outcome of the match. A negated stage cannot
               have a `transform`.

    `do`, `do_value`: success route (callable or `it`), or success constant.
                      Mutually exclusive.

    `orelse`, `default`: mismatch route (callable or `it`), or mismatch constant.
                         If both are given, `orelse` wins.

    `strict`: `True`, `False`, or `None` to use ``dyn.pit_strict``.

    `tag`: if not `None`, a strict mismatch outputs ``(tag, value)`` instead of
           raising.

    `source`: str or `None`. How to show the pattern in error messages.
              Default is ``repr(pattern)``, plus the name of the guard.

    Use the builder methods (`when`, `derive`, `negate`, `then`, `fallback`,
    `otherwise`, `strictly`, `tagged`, `replace`) to make modified copies.
    """
    __slots__ = _slots

    def __init__(self, pattern, *, guard=None, transform=None, negated=False,
                 do=None, do_value=_unset, orelse=None, default=_unset,
                 strict=None, tag=None, source=None):
        for name, f in (("guard", guard), ("transform", transform)):
            if f is not None and not callable(f):
                raise TypeError(f"Expected `{name}` to be callable, got {type(f)} with value {repr(f)}")
        for name, f in (("do", do), ("orelse", orelse)):
            if f is not None and f is not it and not callable(f):
                raise TypeError(f"Expected `{name}` to be callable or `it`, got {type(f)} with value {repr(f)}")
        if strict not in (None, True, False):
            raise TypeError(f"Expected `strict` to be True, False or None, got {repr(strict)}")
        if negated and transform is not None:
            raise ValueError("A negated stage cannot have a transform; it outputs the piped value as-is")
        if do is not None and do_value is not _unset:
            raise ValueError("`do` and `do_value` are mutually exclusive")
        values = {"pattern": as_pattern(pattern), "guard": guard, "transform": transform,
                  "negated": bool(negated), "do": do, "do_value": do_value,
                  "orelse": orelse, "default": default, "strict": strict,
                  "tag": tag, "source": source}
        for k, v in values.items():
            object.__setattr__(self, k, v)

    def __setattr__(self, k, v):
        raise AttributeError(f"StageSpec is immutable; use .replace({k}=...) to make a modified copy")
    def __delattr__(self, k):
        raise AttributeError(f"StageSpec is immutable; cannot delete {k}")

    def replace(self, **changes):
        """Return a copy with the given attributes changed."""
        unknown = set(changes) - set(_slots)
        if unknown:
            raise TypeError(f"Unknown StageSpec attributes: {', '.join(sorted(unknown))}")
        attrs = {k: getattr(self, k) for k in _slots}
        attrs.update(changes)
        pattern = attrs.pop("pattern")
        return StageSpec(pattern, **attrs)

    # builders
    def when(self, pred):
        """Add a guard. An existing guard is kept; both must pass."""
        if self.guard is not None:
            pred = _conjoin(self.guard, pred)
        return self.replace(guard=pred)
    def derive(self, transform):
        """Compute the output from the captured bindings using `transform`."""
        return self.replace(transform=transform)
    def negate(self):
        """Invert the outcome of the match."""
        return self.replace(negated=not self.negated)
    __invert__ = negate
    def then(self, f):
        """On success, route the output through `f`."""
        return self.replace(do=f, do_value=_unset)
    def fallback(self, f):
        """On mismatch, route the piped value through `f`."""
        return self.replace(orelse=f)
    def otherwise(self, value):
        """On mismatch, output `value`."""
        return self.replace(default=value)
    def strictly(self, flag=True):
        return self.replace(strict=flag)
    def tagged(self, tag):
        return self.replace(tag=tag)

    def describe(self):
        """Return the pattern (and guard) as text, for diagnostics."""
        if self.source is not None:
            return self.source
        if self.guard is not None:
            return f"{self.pattern!r} when {_funcname(self.guard)}"
        return repr(self.pattern)

    def __repr__(self):
        prefix = "not " if self.negated else ""
        derived = " (derived)" if self.transform is not None else ""
        return f"<StageSpec {prefix}`{self.describe()}`{derived}>"

def as_spec(obj):
    """Coerce `obj` into a `StageSpec`.

    A `StageSpec` is returned as-is, a `Stage` gives its spec, and anything
    else is treated as a pattern (see `pit.patterns.as_pattern`).
    """
    if isinstance(obj, StageSpec):
        return obj
    if isinstance(obj, Stage):
        return obj.spec
    return StageSpec(obj)

def derive(transform, pattern, when=None):
    """Derive form: on a match, output ``transform(**bindings)``.

    This is what the ``transform <- pattern when guard`` form of the `pit`
    macro does. `pattern` may also be a `StageSpec`; its other settings are kept.
    """
    spec = as_spec(pattern).derive(transform)
    if when is not None:
        spec = spec.when(when)
    return spec

def negate(pattern, when=None):
    """Negated form: let through values that do *not* match `pattern`.

    The guard, if any, belongs to the pattern being negated; i.e. a value is
    let through unless it matches `pattern` *and* passes the guard.
    """
    spec = as_spec(pattern)
    if when is not None:
        spec = spec.when(when)
    return spec.negate()

def evaluate(value, spec):
    """Run `value` through the stage described by `spec`, and return the output.

    Raise `MismatchError` if `value` does not match, the stage is strict, and
    no fallback is configured.
    """
    spec = as_spec(spec)
    bindings = spec.pattern.match(value)
    reason = None
    if bindings is None:
        reason = "pattern"
    elif spec.guard is not None and not _call_with_bindings(spec.guard, bindings):
        reason = "guard"
    matched = reason is None
    if spec.negated:
        matched = not matched
    if not matched:
        return _mismatch(value, spec, reason)
    if spec.transform is not None:
        out = _call_with_bindings(spec.transform, bindings)
    else:
        out = value
    if spec.do_value is not _unset:
        return spec.do_value
    if spec.do is None or spec.do is it:
        return out
    return spec.do(out)

def _mismatch(value, spec, reason):
    if spec.orelse is not None:
        logger.debug("%r: routing mismatched value %r to %r", spec, value, spec.orelse)
        return value if spec.orelse is it else spec.orelse(value)
    if spec.default is not _unset:
        logger.debug("%r: substituting default %r for mismatched value %r", spec, spec.default, value)
        return spec.default
    strict = spec.strict if spec.strict is not None else dyn.pit_strict
    if not strict:
        return value
    if spec.tag is not None:
        logger.debug("%r: tagging mismatched value %r as %r", spec, value, spec.tag)
        return (spec.tag, value)
    verb = "did not expect" if spec.negated else "expected"
    pattern = spec.describe()
    raise MismatchError(f"{verb} piped value to match `{pattern}` but got `{value!r}`",
                        pattern=pattern, spec=spec, value=value, reason=reason)

def _configure(spec, options):
    unknown = set(options) - set(_options)
    if unknown:
        raise TypeError(f"Unknown stage options: {', '.join(sorted(unknown))}; valid options are {', '.join(_options)}")
    spec = as_spec(spec)
    return spec.replace(**options) if options else spec

def pit(value, spec, **options):
    """Pipe `value` through a stage, and return the output.

    `spec` is a `StageSpec`, a `Stage`, or a pattern. `options` override the
    corresponding settings of the spec: `do`, `do_value`, `orelse`, `default`,
    `strict`, `tag`.
    """
    return evaluate(value, _configure(spec, options))

def pit_strict(value, spec, **options):
    """Like `pit`, but raise `MismatchError` on a mismatch.

    Explicit fallbacks (``orelse``, ``default``) still take precedence.
    """
    return pit(value, spec, strict=True, **options)

class Stage:
    """A stage as a one-argument callable, for use in pipes.

    Can be given as the ``do`` or ``orelse`` route of another stage.
    """
    def __init__(self, spec):
        self.spec = as_spec(spec)
    def __call__(self, value):
        return evaluate(value, self.spec)
    def __repr__(self):
        return f"<Stage {self.spec!r}>"

def stage(spec, **options):
    """Create a `Stage`. Options as in `pit`."""
    return Stage(_configure(spec, options))

def stage_strict(spec, **options):
    """Create a strict `Stage`. Options as in `pit`."""
    return stage(spec, strict=True, **options)
