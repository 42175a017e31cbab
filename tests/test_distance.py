# tests/test_distance.py
import pytest

from nearcare.core.models import Facility, UserLocation
from nearcare.discovery.seed import seed_facilities
from nearcare.ranking import haversine_km, nearest, rank

BANGALORE = UserLocation(lat=12.9716, lng=77.5946)


def make_facility(fid, lat, lng, type_="Clinic"):
    return Facility(id=fid, name=f"Facility {fid}", type=type_, lat=lat, lng=lng)


def test_same_point_is_zero():
    assert haversine_km(12.9716, 77.5946, 12.9716, 77.5946) == 0


def test_tenth_of_a_degree_north():
    d = haversine_km(12.9716, 77.5946, 13.0716, 77.5946)
    assert d == pytest.approx(11.1, abs=0.2)


def test_distance_is_positive_for_distinct_points():
    assert haversine_km(0.0, 0.0, 0.0, 0.0001) > 0
    assert haversine_km(-33.86, 151.2, 51.5, -0.12) > 0


def test_rank_annotates_and_sorts():
    ranked = rank(seed_facilities(), BANGALORE)
    distances = [f.distance for f in ranked]
    assert all(d is not None and d >= 0 for d in distances)
    assert distances == sorted(distances)
    # seed facility "1" sits exactly at the origin
    assert ranked[0].id == "1"
    assert ranked[0].distance == 0


def test_rank_keeps_input_order_on_ties():
    a = make_facility("a", 13.0, 77.6)
    b = make_facility("b", 13.0, 77.6)
    c = make_facility("c", 12.9716, 77.5946)
    assert [f.id for f in rank([a, b, c], BANGALORE)] == ["c", "a", "b"]
    assert [f.id for f in rank([b, a, c], BANGALORE)] == ["c", "b", "a"]


def test_rank_is_idempotent():
    once = rank(seed_facilities(), BANGALORE)
    assert rank(once, BANGALORE) == once


def test_rank_without_origin_passes_through():
    facilities = seed_facilities()
    out = rank(facilities, None)
    assert out == facilities
    assert out is not facilities
    assert all(f.distance is None for f in out)


def test_rank_does_not_mutate_input():
    facilities = seed_facilities()
    rank(facilities, BANGALORE)
    assert all(f.distance is None for f in facilities)


def test_nearest_limits_result():
    top = nearest(seed_facilities(), BANGALORE, limit=2)
    assert len(top) == 2
    assert top[0].id == "1"
    assert top[0].distance <= top[1].distance
