import math

import pytest

from src.storefinder.models.domain import Coordinates
from src.storefinder.services.geospatial import EARTH_RADIUS_MILES, distance, haversine_miles

PORTLAND = Coordinates(lat=45.5231, lng=-122.6765)
SEATTLE = Coordinates(lat=47.6062, lng=-122.3321)


def test_distance_is_symmetric():
    assert distance(PORTLAND, SEATTLE) == distance(SEATTLE, PORTLAND)


def test_distance_to_self_is_zero():
    assert distance(PORTLAND, PORTLAND) == 0.0


def test_portland_to_seattle_in_miles():
    assert distance(PORTLAND, SEATTLE) == pytest.approx(145.0, abs=2.0)


def test_antipodal_points_are_half_circumference():
    miles = haversine_miles(45.0, -120.0, -45.0, 60.0)
    assert math.isfinite(miles)
    assert miles == pytest.approx(math.pi * EARTH_RADIUS_MILES, rel=1e-9)


def test_small_moves_give_small_distances():
    nudged = Coordinates(lat=PORTLAND.lat + 1e-5, lng=PORTLAND.lng)
    assert 0 < distance(PORTLAND, nudged) < 0.01
