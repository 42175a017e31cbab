# tests/test_store.py
from nearcare.core.store import ALL_FACILITIES_KEY, USER_LOCATION_KEY, LocalStore


def test_get_missing_key(store):
    assert store.get(USER_LOCATION_KEY) is None
    assert USER_LOCATION_KEY not in store


def test_set_overwrites(store):
    store.set(USER_LOCATION_KEY, {"lat": 1.0, "lng": 2.0})
    store.set(USER_LOCATION_KEY, {"lat": 3.0, "lng": 4.0})
    assert store.get(USER_LOCATION_KEY) == {"lat": 3.0, "lng": 4.0}


def test_remove_and_clear(store):
    store.set(ALL_FACILITIES_KEY, [])
    store.set(USER_LOCATION_KEY, {"lat": 1.0, "lng": 2.0})
    store.remove(ALL_FACILITIES_KEY)
    assert ALL_FACILITIES_KEY not in store
    assert USER_LOCATION_KEY in store
    store.clear()
    assert store.get(USER_LOCATION_KEY) is None


def test_values_survive_reopen(tmp_path):
    path = str(tmp_path / "store.sqlite3")
    s = LocalStore(path)
    s.set(USER_LOCATION_KEY, {"lat": 12.9716, "lng": 77.5946})
    s.close()

    reopened = LocalStore(path)
    assert reopened.get(USER_LOCATION_KEY) == {"lat": 12.9716, "lng": 77.5946}
    reopened.close()
