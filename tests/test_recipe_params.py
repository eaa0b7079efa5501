import pytest

from gridparts.recipes import (
    RECIPE_REGISTRY,
    available_parts,
    build_part,
    default_params,
    get_recipe,
)
from gridparts.recipes.beam import BeamParams
from gridparts.recipes.container import ContainerParams
from gridparts.recipes.cutting_jig import CuttingJigParams
from gridparts.recipes.hinge import HingeParams
from gridparts.recipes.threaded_fastener import ThreadedFastenerParams, thread_for
from gridparts.threadgen import metric_thread


def test_every_family_is_registered():
    assert available_parts() == sorted([
        "beam", "bracket", "container", "cup_holder", "cutting_jig",
        "dowel_holder", "hinge", "hook", "threaded_fastener",
    ])
    for module, params_class in RECIPE_REGISTRY.values():
        assert callable(module.build) and callable(module.parts)
        params_class()


def test_family_names_are_normalised():
    assert get_recipe("Cup-Holder") == RECIPE_REGISTRY["cup_holder"]
    assert isinstance(default_params("cutting-jig"), CuttingJigParams)


def test_unknown_family():
    with pytest.raises(ValueError):
        get_recipe("gizmo")
    with pytest.raises(ValueError):
        build_part("gizmo")


class TestFromMapping:

    def test_camel_and_snake_case(self):
        params = BeamParams.from_mapping({"lengthInGrids": 3, "outer_fillet": 1.0})
        assert params.length_in_grids == 3
        assert params.outer_fillet == 1.0
        assert params.grid_spacing == 20.0
        assert params.length == 60.0

    def test_missing_mapping_gives_defaults(self):
        assert BeamParams.from_mapping(None) == BeamParams()

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            BeamParams.from_mapping({"lengthInGridz": 3})

    def test_same_field_twice(self):
        with pytest.raises(ValueError):
            BeamParams.from_mapping({"lengthInGrids": 3, "length_in_grids": 4})

    def test_unknown_parameter_fails_before_building(self):
        with pytest.raises(ValueError):
            build_part("beam", {"colour": "red"})

    def test_as_dict_round_trips(self):
        params = CuttingJigParams(length_in_gu=3)
        assert CuttingJigParams.from_mapping(params.as_dict()) == params


class TestValidation:

    def test_beam_holes_fit_the_grid(self):
        with pytest.raises(ValueError):
            BeamParams(fastener_diameter=25.0)

    def test_container_bottom_fillet_exceeds_wall(self):
        with pytest.raises(ValueError):
            ContainerParams(wall_thickness=5.0, bottom_fillet=5.0)

    def test_hinge_needs_a_side(self):
        with pytest.raises(ValueError):
            HingeParams(even_side=False, odd_side=False)

    def test_hinge_ratio_bounds(self):
        with pytest.raises(ValueError):
            HingeParams(knuckle_even_odd_ratio=1.0)

    def test_non_positive_sizes(self):
        with pytest.raises(ValueError):
            CuttingJigParams(height=0)
        with pytest.raises(ValueError):
            ThreadedFastenerParams(diameter=-1)


def test_thread_for_uses_catalog_pitch():
    thread = thread_for(8.4)
    assert thread.major_diameter == 8.4
    assert thread.pitch == 1.25


def test_thread_for_matches_metric_thread():
    assert thread_for(8) == metric_thread(8, 1.25)
    assert isinstance(thread_for(3).pitch, float)
