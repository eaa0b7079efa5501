"""Ownership rules for Solid handles.

These use placeholder shapes: consumption is enforced before any kernel
call is made, so the checks hold with or without pythonocc-core.
"""

import pytest

from gridparts import solid_ops
from gridparts.brep import BoundingBox, Solid, make_step
from gridparts.errors import BooleanError, ConsumedSolidError
from gridparts.geom import Point3


def test_consume_hands_over_shape_once():
    solid = Solid("shape")
    assert solid.consume("fuse") == "shape"
    assert solid.consumed
    with pytest.raises(ConsumedSolidError):
        solid.shape
    with pytest.raises(ConsumedSolidError):
        solid.consume("cut")


def test_derive_extends_provenance():
    base = Solid("a", (make_step("extrude", distance=5.0),))
    other = Solid("b")
    derived = base.derive("c", "fuse", (other,), same_face=True)
    assert derived.id not in (base.id, other.id)
    assert [step.operation for step in derived.provenance] == ["extrude", "fuse"]
    assert derived.provenance[-1].inputs == (base.id, other.id)
    assert "fuse(same_face=True)" in derived.history()
    assert not base.consumed


def test_boolean_rejects_same_operand_twice():
    solid = Solid("shape")
    with pytest.raises(BooleanError):
        solid_ops.fuse(solid, solid)
    assert not solid.consumed


def test_boolean_rejects_consumed_operand():
    a = Solid("a")
    b = Solid("b")
    b.consume("cut")
    with pytest.raises(ConsumedSolidError):
        solid_ops.fuse(a, b)
    assert not a.consumed


def test_fuse_all_needs_input():
    with pytest.raises(BooleanError):
        solid_ops.fuse_all([])


def test_bounding_box_helpers():
    box = BoundingBox(Point3(0, 0, 0), Point3(10, 4, 2))
    assert box.size == (10, 4, 2)
    assert box.center == Point3(5, 2, 1)
    assert box.contains((10, 4, 2))
    assert not box.contains((10.5, 0, 0))
    assert box.contains((10.5, 0, 0), tol=1.0)
