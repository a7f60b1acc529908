import pytest

from compare import compare_form, interpolate, overlay, shared_grid
from models import CodeKind, InputMode, ProfilePoint, WindInput
from profile_model import ProfileModel, compute_profile

PROFILE = (
    ProfilePoint(0.0, 100.0),
    ProfilePoint(5.0, 150.0),
    ProfilePoint(10.0, 170.0),
)


def test_interpolate_exact_nodes():
    for p in PROFILE:
        assert interpolate(PROFILE, p.height) == p.pressure


def test_interpolate_exact_nodes_on_computed_profile():
    res = compute_profile(WindInput(code=CodeKind.PRIMARY, height=33.0, base_speed_override=47.0))
    for p in res.profile:
        assert interpolate(res.profile, p.height) == pytest.approx(p.pressure, abs=1e-9)


def test_interpolate_between_points():
    assert interpolate(PROFILE, 2.5) == pytest.approx(125.0)
    assert interpolate(PROFILE, 7.5) == pytest.approx(160.0)


def test_interpolate_clamps_above_range():
    assert interpolate(PROFILE, 25.0) == 170.0


def test_interpolate_clamps_below_ground():
    assert interpolate(PROFILE, -3.0) == 100.0


def test_interpolate_repeated_heights():
    prof = (ProfilePoint(0.0, 10.0), ProfilePoint(0.0, 10.0), ProfilePoint(0.1, 12.0), ProfilePoint(0.1, 12.0),
            ProfilePoint(0.2, 14.0))
    assert interpolate(prof, 0.1) == 12.0
    assert interpolate(prof, 0.15) == pytest.approx(13.0)


def test_shared_grid_has_13_points():
    grid = shared_grid(24.0)
    assert len(grid) == 13
    assert grid[0] == 0
    assert grid[-1] == 24.0
    assert grid[1] == 2.0


def test_overlay_shares_grid_up_to_tallest_profile():
    a = compute_profile(WindInput(code=CodeKind.PRIMARY, height=10.0, base_speed_override=50.0))
    b = compute_profile(WindInput(code=CodeKind.SECONDARY, height=20.0, base_speed_override=110.0))
    ov = overlay(a, b)
    assert len(ov.a) == len(ov.b) == 13
    assert [p.height for p in ov.a] == [p.height for p in ov.b]
    assert ov.heights[-1] == 20.0
    assert ov.label_a == "IS 875"
    assert ov.label_b == "ASCE/GCC"
    # IS profile ends at 10 m, so it is held flat above that
    assert ov.a[-1].pressure == a.profile[-1].pressure
    assert ov.b[-1].pressure == b.profile[-1].pressure
    assert ov.a[0].pressure == a.profile[0].pressure


def test_overlay_of_ground_level_profiles():
    a = compute_profile(WindInput(code=CodeKind.PRIMARY, height=0.0, base_speed_override=50.0))
    b = compute_profile(WindInput(code=CodeKind.SECONDARY, height=0.0, base_speed_override=110.0))
    ov = overlay(a, b)
    assert all(z == 0 for z in ov.heights)
    assert all(p.pressure == a.derived_pressure_base for p in ov.a)


def test_compare_form_runs_both_codes():
    raw = {"height": "30", "is_vb": "44", "asce_V": "115"}
    ov = compare_form(ProfileModel(), raw, InputMode.AUTO)
    assert ov.heights[-1] == 30.0
    assert ov.a[0].pressure == pytest.approx(0.6 * 44 * 44)
    assert ov.b[0].pressure == pytest.approx(0.00256 * 115 ** 2 * 0.85 * 0.85 * 47.880258, abs=0.005)
