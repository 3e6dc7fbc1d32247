# -*- coding: utf-8 -*-
"""Write stage specs inline, as code.

The `pat[]` macro compiles a pattern written as a Python expression into the
run-time descriptors of `pit.patterns`, and its transform and guard into
lambdas of the captured names.
"""

__all__ = ["pat"]

from ast import (Name, Constant, Tuple, List, Dict, Call, Attribute,
                 BinOp, BitOr, LShift, UnaryOp, Not, Invert, USub, UAdd,
                 Starred, NamedExpr, Lambda, arguments, arg, keyword)

from mcpyrate.quotes import macros, q, u, h  # noqa: F401

from mcpyrate import unparse

from ..patterns import Wildcard, Capture, Literal, Seq, Star, Record, Instance, Or, As
from ..stages import StageSpec

def pat(tree, *, syntax, **kw):
    """[syntax, expr] A stage spec, written as code.

    Usage::

        pat[pattern]                  # guard-only form
        pat[expr << pattern]          # derive form
        pat[not pattern]              # negated form (also ``~pattern``)

    Any of these may be followed by a guard::

        pat[expr << pattern, when(guard)]

    The result is a `pit.StageSpec`, to be used with `pit`, `stage` and friends::

        from pit.syntax import macros, pat  # noqa: F401
        from pit import pit, stage

        pit(("ok", 22), pat[n * 2 << ("ok", n)])  # --> 44
        pit(("ok", 22), pat[("ok", n), when(n > 30)], strict=True)
        # --> MismatchError: expected piped value to match `('ok', n) when n > 30` but got `('ok', 22)`

    Pattern syntax, following Python's ``match`` statement:

        ``_``                    wildcard
        ``name``                 capture; a repeated name must match equal values
        ``42``, ``"ok"``, ``None``, ``Color.RED``
                                 literal (dotted names are evaluated, not captured)
        ``(p, q)``, ``[p, *rest]``
                                 tuple / list shape; ``*_`` discards
        ``{"k": p, **rest}``     mapping shape; extra keys are allowed
        ``Cls(p, attr=q)``       instance of ``Cls``, then attributes
        ``p | q``                alternatives
        ``(name := p)``          match ``p``, bind the whole subject to ``name``

    The transform and the guard are ordinary expressions; the names captured by
    the pattern are in scope.

    **CAUTION**: ``<<`` binds more tightly than ``|`` and comparisons. Write
    ``pat[x << (p | q)]``, not ``pat[x << p | q]``, and ``pat[(n > 2) << p]``.
    """
    if syntax != "expr":
        raise SyntaxError("pat is an expr macro only")  # pragma: no cover
    return _pat(tree)

def _iswhen(tree):
    return type(tree) is Call and type(tree.func) is Name and tree.func.id == "when"

def _pat(tree):
    guard = None
    if type(tree) is Tuple and tree.elts and _iswhen(tree.elts[-1]):
        if len(tree.elts) != 2:
            raise SyntaxError("Expected pat[pattern, when(guard)]; parenthesize a tuple pattern")  # pragma: no cover
        tree, w = tree.elts
        if len(w.args) != 1 or w.keywords:
            raise SyntaxError("when() takes exactly one guard expression")  # pragma: no cover
        guard = w.args[0]

    negated = False
    transform = None
    if type(tree) is UnaryOp and type(tree.op) in (Not, Invert):
        negated = True
        tree = tree.operand
    elif type(tree) is BinOp and type(tree.op) is LShift:
        transform, tree = tree.left, tree.right

    names = []
    pattern = _compile(tree, names)

    source = unparse(tree)
    if guard is not None:
        source = f"{source} when {unparse(guard)}"

    kws = [keyword(arg="source", value=q[u[source]])]
    if negated:
        kws.append(keyword(arg="negated", value=q[True]))
    if transform is not None:
        kws.append(keyword(arg="transform", value=_lambda(names, transform)))
    if guard is not None:
        kws.append(keyword(arg="guard", value=_lambda(names, guard)))
    return Call(func=q[h[StageSpec]], args=[pattern], keywords=kws)

def _lambda(params, body):
    return Lambda(args=arguments(posonlyargs=[], args=[arg(arg=x) for x in params],
                                 vararg=None, kwonlyargs=[], kw_defaults=[],
                                 kwarg=None, defaults=[]),
                  body=body)

def _capture(name, names):
    if name not in names:
        names.append(name)
    return q[h[Capture](u[name])]

def _star(tree, names):
    if type(tree.value) is not Name:
        raise SyntaxError(f"Expected *name or *_ in a sequence pattern, got {unparse(tree)}")  # pragma: no cover
    if tree.value.id == "_":
        return q[h[Star]()]
    if tree.value.id not in names:
        names.append(tree.value.id)
    return q[h[Star](u[tree.value.id])]

def _compile(tree, names):
    """Pattern expression --> expression that constructs the `Pattern` at run time.

    `names` is updated in place with the captured names, in order of appearance.
    """
    T = type(tree)
    if T is Name:
        if tree.id == "_":
            return q[h[Wildcard]()]
        return _capture(tree.id, names)
    if T is Constant:
        if tree.value is Ellipsis:
            return q[h[Wildcard]()]
        return Call(func=q[h[Literal]], args=[tree], keywords=[])
    if T is Attribute or (T is UnaryOp and type(tree.op) in (USub, UAdd) and type(tree.operand) is Constant):
        return Call(func=q[h[Literal]], args=[tree], keywords=[])
    if T in (Tuple, List):
        items = [_star(x, names) if type(x) is Starred else _compile(x, names)
                 for x in tree.elts]
        kind = q[h[tuple]] if T is Tuple else q[h[list]]
        return Call(func=q[h[Seq]], args=items, keywords=[keyword(arg="kind", value=kind)])
    if T is Dict:
        keys, values, rest = [], [], None
        for k, v in zip(tree.keys, tree.values):
            if k is None:  # **rest
                if type(v) is not Name or rest is not None:
                    raise SyntaxError(f"Expected a single **name in a mapping pattern, got {unparse(tree)}")  # pragma: no cover
                rest = v.id
                if rest not in names:
                    names.append(rest)
                continue
            keys.append(k)
            values.append(_compile(v, names))
        kws = [keyword(arg="rest", value=q[u[rest]])] if rest is not None else []
        return Call(func=q[h[Record]], args=[Dict(keys=keys, values=values)], keywords=kws)
    if T is Call:
        if _iswhen(tree):
            raise SyntaxError("when(guard) must be the last element of pat[...]")  # pragma: no cover
        if any(type(x) is Starred for x in tree.args) or any(k.arg is None for k in tree.keywords):
            raise SyntaxError(f"Star-args are not supported in an instance pattern: {unparse(tree)}")  # pragma: no cover
        args = [tree.func] + [_compile(x, names) for x in tree.args]
        kws = [keyword(arg=k.arg, value=_compile(k.value, names)) for k in tree.keywords]
        return Call(func=q[h[Instance]], args=args, keywords=kws)
    if T is BinOp and type(tree.op) is BitOr:
        return Call(func=q[h[Or]], args=[_compile(tree.left, names), _compile(tree.right, names)], keywords=[])
    if T is NamedExpr:
        name = tree.target.id
        inner = _compile(tree.value, names)
        if name not in names:
            names.append(name)
        return Call(func=q[h[As]], args=[inner, q[u[name]]], keywords=[])
    if T is BinOp and type(tree.op) is LShift:
        raise SyntaxError(f"Unexpected << inside a pattern: {unparse(tree)}; parenthesize the pattern, e.g. x << (p | q)")  # pragma: no cover
    raise SyntaxError(f"Unsupported pattern syntax: {unparse(tree)}")  # pragma: no cover
