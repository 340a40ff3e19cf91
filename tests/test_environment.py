import pytest

from nino.errors import NinoUnboundSymbol
from nino.evaluation.apply import call_frame
from nino.types.ast import Declaration, Number, NUMBER
from nino.types.environment import Environment


def _decl(name, value):
    return Declaration(name, NUMBER, Number(float(value)))


def test_define_and_lookup(env):
    env.define("x", _decl("x", 1))
    assert env.lookup("x").expression == Number(1.0)
    assert env.get("x") == _decl("x", 1)
    assert "x" in env


def test_get_returns_none_at_root(env):
    assert env.get("missing") is None
    assert "missing" not in env


def test_lookup_unbound_raises(env):
    with pytest.raises(NinoUnboundSymbol) as exc:
        env.lookup("missing")
    assert exc.value.message == "Cannot lookup unbound symbol missing"


def test_child_reads_through_to_parent(env):
    env.define("x", _decl("x", 1))
    child = Environment.with_parent(env)
    assert child.lookup("x").expression == Number(1.0)
    assert child.find("x") is env


def test_child_shadowing_never_writes_through(env):
    env.define("x", _decl("x", 1))
    child = Environment(outer=env)
    child.define("x", _decl("x", 2))
    assert child.lookup("x").expression == Number(2.0)
    assert env.lookup("x").expression == Number(1.0)


def test_update_defines_locally(env):
    child = Environment(outer=env)
    child.update({"a": _decl("a", 1), "b": _decl("b", 2)})
    assert set(child.vars) == {"a", "b"}
    assert env.vars == {}


def test_depth(env):
    assert env.depth() == 1
    assert Environment(outer=Environment(outer=env)).depth() == 3


def test_str_and_repr(env):
    env.define("x", _decl("x", 1))
    child = Environment(outer=env)
    assert str(env) == "{x: num}"
    assert str(child) == "{} -> ..."
    assert repr(child) == "<Environment chain: {} -> {x: num}>"


def test_call_frame_replaces_rather_than_nests(env):
    env.define("g", _decl("g", 0))
    frame = Environment(outer=env)
    for i in range(100):
        frame = call_frame(frame, {"i": _decl("i", i)})
    # chain length is independent of the number of calls
    assert frame.depth() == 2
    assert frame.lookup("i").expression == Number(99.0)
    assert frame.lookup("g").expression == Number(0.0)


def test_call_frame_keeps_caller_bindings_visible(env):
    caller = Environment(outer=env)
    caller.define("x", _decl("x", 1))
    caller.define("y", _decl("y", 2))
    frame = call_frame(caller, {"x": _decl("x", 10)})
    assert frame.lookup("x").expression == Number(10.0)
    assert frame.lookup("y").expression == Number(2.0)
    # the caller's frame is left as it was
    assert caller.lookup("x").expression == Number(1.0)
