"""Kernel exceptions surface as typed gridparts errors.

pythonocc-core reports failed builders as ``RuntimeError``; stand-in
builders raise the same way so these checks run without the kernel.
"""

import pytest

from gridparts import forming, solid_ops
from gridparts.boolean import occ_engine
from gridparts.brep import Solid, Wire
from gridparts.errors import (
    BooleanError,
    ConsumedSolidError,
    FormingError,
    kernel_errors,
)


class _FailingBuilder:

    def __init__(self, *args):
        pass

    def __getattr__(self, name):
        return lambda *args: None

    def Build(self):
        raise RuntimeError("StdFail_NotDone")


def test_runtime_error_becomes_forming_error():
    with pytest.raises(FormingError) as info:
        with kernel_errors("loft", "a -> b"):
            raise RuntimeError("Standard_Failure")
    assert info.value.operation == "loft"
    assert info.value.subject == "a -> b"
    assert isinstance(info.value.__cause__, RuntimeError)


def test_boolean_error_type():
    with pytest.raises(BooleanError) as info:
        with kernel_errors("cut", error=BooleanError):
            raise RuntimeError("Standard_Failure")
    assert info.value.operation == "cut"


def test_gridparts_errors_pass_through():
    with pytest.raises(ConsumedSolidError):
        with kernel_errors("fuse", error=BooleanError):
            raise ConsumedSolidError("solid #1 was consumed")


def test_other_exceptions_are_untouched():
    with pytest.raises(KeyError):
        with kernel_errors("extrude"):
            raise KeyError("x")


def test_loft_build_failure_is_typed(monkeypatch):
    monkeypatch.setattr(forming, "require_occ", lambda: None)
    monkeypatch.setattr(forming, "BRepOffsetAPI_ThruSections", _FailingBuilder)
    wires = [Wire("lower", label="lower"), Wire("upper", label="upper")]
    with pytest.raises(FormingError) as info:
        forming.loft(wires)
    assert info.value.operation == "loft"
    assert info.value.subject == "lower -> upper"


def test_boolean_build_failure_is_typed_and_keeps_operands(monkeypatch):
    monkeypatch.setattr(occ_engine, "_make_builder", lambda op: _FailingBuilder())
    monkeypatch.setattr(occ_engine, "_shape_list", lambda *shapes: list(shapes))
    a, b = Solid("a"), Solid("b")
    with pytest.raises(BooleanError) as info:
        solid_ops.cut(a, b)
    assert info.value.operation == "cut"
    assert not a.consumed and not b.consumed
