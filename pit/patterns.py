# -*- coding: utf-8 -*-
"""Structural patterns, matched at run time.

A pattern is a small declarative description of the shape of a value. Matching
a value against a pattern either fails (``None``) or produces the bindings
captured by the pattern, as an immutable mapping of name to value::

    from pit import cap, wild, as_pattern

    p = as_pattern(("ok", {"count": cap.n}))
    assert p.match(("ok", {"count": 10})) == {"n": 10}
    assert p.match(("error", "boom")) is None

Plain Python data is coerced by ``as_pattern``: tuples and lists become
sequence patterns, dicts become mapping patterns, classes become instance
patterns, ``...`` is a wildcard, and anything else is a literal.

The semantics follow Python's own ``match`` statement, with one difference:
a name may appear more than once in the same pattern, in which case all its
occurrences must match equal values::

    assert as_pattern((cap.x, cap.x)).match((1, 1)) == {"x": 1}
    assert as_pattern((cap.x, cap.x)).match((1, 2)) is None
"""

__all__ = ["Pattern", "Wildcard", "Capture", "Literal", "Seq", "Star",
           "Record", "Instance", "Or", "As",
           "as_pattern", "cap", "wild"]

from collections.abc import Mapping

from unpythonic import frozendict

class Pattern:
    """Abstract base class for patterns.

    Subclasses implement ``_match(value, bindings)``, which updates the dict
    ``bindings`` in place and returns whether the match succeeded, and
    ``names()``.
    """
    def match(self, value):
        """Match `value` against this pattern.

        Return the captured bindings as a `frozendict`, or `None` if `value`
        does not match.
        """
        bindings = {}
        if not self._match(value, bindings):
            return None
        return frozendict(bindings)

    def _match(self, value, bindings):  # pragma: no cover
        raise NotImplementedError

    def names(self):
        """Return the names bound by this pattern, in order of first appearance."""
        return ()

    def __or__(self, other):
        return Or(self, other)
    def __ror__(self, other):
        return Or(other, self)

    def as_(self, name):
        """Match this pattern, and bind the whole subject to `name`."""
        return As(self, name)

def _uniq(names):
    out = []
    for name in names:
        if name not in out:
            out.append(name)
    return tuple(out)

def _bind(bindings, name, value):
    if name in bindings:
        return bindings[name] == value
    bindings[name] = value
    return True

class Wildcard(Pattern):
    """Match anything, bind nothing."""
    def _match(self, value, bindings):
        return True
    def __repr__(self):
        return "_"

wild = Wildcard()

def _check_name(name):
    if not isinstance(name, str) or not name.isidentifier():
        raise TypeError(f"Capture name must be an identifier, got {name!r}")
    if name == "_":
        raise ValueError("'_' is the wildcard; it cannot be used as a capture name")
    return name

class Capture(Pattern):
    """Match anything, and bind it to `name`."""
    def __init__(self, name):
        self.name = _check_name(name)
    def _match(self, value, bindings):
        return _bind(bindings, self.name, value)
    def names(self):
        return (self.name,)
    def __repr__(self):
        return self.name

class _CaptureFactory:
    """Attribute access creates captures: ``cap.n`` is ``Capture("n")``."""
    def __getattr__(self, name):
        if name.startswith("__"):  # don't confuse copy, pickle and friends
            raise AttributeError(name)
        return Capture(name)
    def __repr__(self):  # pragma: no cover
        return "<capture factory>"

cap = _CaptureFactory()

class Literal(Pattern):
    """Match a value equal to `value`.

    ``None``, ``True`` and ``False`` are compared by identity, like in a
    ``match`` statement, so ``Literal(True)`` does not match ``1``.
    """
    def __init__(self, value):
        self.value = value
    def _match(self, value, bindings):
        if self.value is None or self.value is True or self.value is False:
            return value is self.value
        return value == self.value
    def __repr__(self):
        return repr(self.value)

class Star(Pattern):
    """Inside a `Seq`, match the remaining middle elements.

    With a name, bind them as a list. Only meaningful inside a `Seq`.
    """
    def __init__(self, name=None):
        self.name = _check_name(name) if name is not None else None
    def _match(self, value, bindings):
        if self.name is None:
            return True
        return _bind(bindings, self.name, list(value))
    def names(self):
        return (self.name,) if self.name is not None else ()
    def __repr__(self):
        return f"*{self.name if self.name is not None else '_'}"

class Seq(Pattern):
    """Match a sequence of type `kind` (default `tuple`) element by element.

    At most one item may be a `Star`, which absorbs any number of elements.
    """
    def __init__(self, *items, kind=tuple):
        self.items = tuple(as_pattern(x) for x in items)
        self.kind = kind
        stars = [k for k, x in enumerate(self.items) if isinstance(x, Star)]
        if len(stars) > 1:
            raise ValueError(f"At most one Star allowed in a sequence pattern, got {len(stars)}")
        self._star = stars[0] if stars else None

    def _match(self, value, bindings):
        if not isinstance(value, self.kind):
            return False
        n = len(self.items)
        if self._star is None:
            if len(value) != n:
                return False
            return all(p._match(x, bindings) for p, x in zip(self.items, value))
        if len(value) < n - 1:
            return False
        k = self._star
        nafter = n - k - 1
        head, tail = self.items[:k], self.items[k + 1:]
        end = len(value) - nafter
        return (all(p._match(x, bindings) for p, x in zip(head, value[:k])) and
                self.items[k]._match(value[k:end], bindings) and
                all(p._match(x, bindings) for p, x in zip(tail, value[end:])))

    def names(self):
        return _uniq(name for p in self.items for name in p.names())

    def __repr__(self):
        elts = ", ".join(repr(p) for p in self.items)
        if self.kind is list:
            return f"[{elts}]"
        if self.kind is tuple:
            return f"({elts},)" if len(self.items) == 1 else f"({elts})"
        return f"{self.kind.__name__}({elts})"

class Record(Pattern):
    """Match a mapping that has (at least) the given keys.

    Each value is matched against its sub-pattern. Extra keys are allowed;
    if `rest` is a name, a dict of the extra items is bound to it.
    """
    def __init__(self, mapping=None, rest=None, **kwargs):
        items = dict(mapping or {})
        items.update(kwargs)
        self.items = {k: as_pattern(v) for k, v in items.items()}
        self.rest = _check_name(rest) if rest is not None else None

    def _match(self, value, bindings):
        if not isinstance(value, Mapping):
            return False
        for k, p in self.items.items():
            if k not in value or not p._match(value[k], bindings):
                return False
        if self.rest is not None:
            extra = {k: v for k, v in value.items() if k not in self.items}
            return _bind(bindings, self.rest, extra)
        return True

    def names(self):
        names = [name for p in self.items.values() for name in p.names()]
        if self.rest is not None:
            names.append(self.rest)
        return _uniq(names)

    def __repr__(self):
        elts = [f"{k!r}: {p!r}" for k, p in self.items.items()]
        if self.rest is not None:
            elts.append(f"**{self.rest}")
        return "{" + ", ".join(elts) + "}"

# Builtins whose single positional subpattern matches the whole subject.
_self_matching = (bool, bytearray, bytes, dict, float, frozenset, int, list, set, str, tuple)

class Instance(Pattern):
    """Match an instance of `cls`, then its attributes.

    Positional subpatterns are matched against the attributes named by
    ``cls.__match_args__``; keyword subpatterns against attributes by name.
    A missing attribute is a mismatch.
    """
    def __init__(self, cls, *args, **kwargs):
        if not isinstance(cls, type):
            raise TypeError(f"Expected a class, got {type(cls)} with value {repr(cls)}")
        self.cls = cls
        self.args = tuple(as_pattern(x) for x in args)
        self.kwargs = {k: as_pattern(v) for k, v in kwargs.items()}
        if self.args and not self._selfmatch():
            match_args = getattr(cls, "__match_args__", ())
            if len(self.args) > len(match_args):
                raise TypeError(f"{cls.__name__}() accepts {len(match_args)} positional sub-patterns ({len(self.args)} given)")
            self._argnames = match_args[:len(self.args)]
        else:
            self._argnames = ()

    def _selfmatch(self):
        return (len(self.args) == 1 and issubclass(self.cls, _self_matching) and
                not hasattr(self.cls, "__match_args__"))

    def _match(self, value, bindings):
        if not isinstance(value, self.cls):
            return False
        if self.args and self._selfmatch():
            if not self.args[0]._match(value, bindings):
                return False
        else:
            for attr, p in zip(self._argnames, self.args):
                if not hasattr(value, attr) or not p._match(getattr(value, attr), bindings):
                    return False
        for attr, p in self.kwargs.items():
            if not hasattr(value, attr) or not p._match(getattr(value, attr), bindings):
                return False
        return True

    def names(self):
        return _uniq(name for p in self.args + tuple(self.kwargs.values())
                     for name in p.names())

    def __repr__(self):
        elts = [repr(p) for p in self.args] + [f"{k}={p!r}" for k, p in self.kwargs.items()]
        return f"{self.cls.__name__}({', '.join(elts)})"

class Or(Pattern):
    """Match the first alternative that matches.

    All alternatives must bind the same names.
    """
    def __init__(self, *alternatives):
        if not alternatives:
            raise ValueError("Or needs at least one alternative")
        alts = []
        for x in alternatives:  # flatten p | q | r
            x = as_pattern(x)
            alts.extend(x.alternatives if isinstance(x, Or) else (x,))
        self.alternatives = tuple(alts)
        first = set(self.alternatives[0].names())
        for p in self.alternatives[1:]:
            if set(p.names()) != first:
                raise ValueError(f"Alternatives must bind the same names; {p!r} binds {sorted(p.names())}, expected {sorted(first)}")

    def _match(self, value, bindings):
        for p in self.alternatives:
            attempt = dict(bindings)
            if p._match(value, attempt):
                bindings.update(attempt)
                return True
        return False

    def names(self):
        return self.alternatives[0].names()

    def __repr__(self):
        return " | ".join(repr(p) for p in self.alternatives)

class As(Pattern):
    """Match `pattern`, then bind the whole subject to `name`."""
    def __init__(self, pattern, name):
        self.pattern = as_pattern(pattern)
        self.name = _check_name(name)
    def _match(self, value, bindings):
        return self.pattern._match(value, bindings) and _bind(bindings, self.name, value)
    def names(self):
        return _uniq(self.pattern.names() + (self.name,))
    def __repr__(self):
        return f"{self.pattern!r} as {self.name}"

def as_pattern(obj):
    """Coerce plain Python data into a `Pattern`.

    ``tuple`` and ``list`` become `Seq`, ``dict`` becomes `Record`, a class
    becomes `Instance`, ``...`` becomes the wildcard. A `Pattern` is returned
    as-is. Anything else becomes a `Literal`.
    """
    if isinstance(obj, Pattern):
        return obj
    if obj is Ellipsis:
        return wild
    if type(obj) is tuple:
        return Seq(*obj, kind=tuple)
    if type(obj) is list:
        return Seq(*obj, kind=list)
    if type(obj) is dict:
        return Record(obj)
    if isinstance(obj, type):
        return Instance(obj)
    return Literal(obj)
