# nearcare/visualize/visualize.py
"""
Map pins and exports for the visible facility list.

Every call to ``generate_map`` builds a fresh folium map from the base tile
layer up, so no pin from an earlier render can survive a filter or selection
change.
"""
import html
from pathlib import Path
from typing import AbstractSet, List, Optional, Sequence, Tuple

import folium
import pandas as pd

from nearcare.core.models import Facility, MarkerSpec, UserLocation

USER_COLOR = "blue"
FACILITY_COLOR = "red"
SELECTED_COLOR = "green"
PIN_COLOR = "orange"
DEFAULT_CENTER = (12.9716, 77.5946)
DEFAULT_ZOOM = 12


def marker_specs(
    facilities: Sequence[Facility],
    selected: AbstractSet[str],
    user_location: Optional[UserLocation] = None,
    pinned: Optional[Tuple[float, float]] = None,
) -> List[MarkerSpec]:
    markers = []
    if user_location is not None:
        markers.append(MarkerSpec(
            kind="user",
            lat=user_location.lat,
            lng=user_location.lng,
            color=USER_COLOR,
            popup="Your Location",
        ))
    if pinned is not None:
        markers.append(MarkerSpec(
            kind="pin",
            lat=pinned[0],
            lng=pinned[1],
            color=PIN_COLOR,
            popup="Pinned location",
        ))
    for f in facilities:
        popup = f"<b>{html.escape(f.name)}</b><br/>{html.escape(f.address or '')}"
        if f.distance is not None:
            popup += f"<br/>{f.distance:.2f} km"
        markers.append(MarkerSpec(
            kind="facility",
            lat=f.lat,
            lng=f.lng,
            color=SELECTED_COLOR if f.id in selected else FACILITY_COLOR,
            popup=popup,
            facility_id=f.id,
        ))
    return markers


def generate_map(
    markers: Sequence[MarkerSpec],
    center: Optional[Tuple[float, float]] = None,
    path: str = "map.html",
    zoom: int = DEFAULT_ZOOM,
) -> str:
    m = folium.Map(location=list(center or DEFAULT_CENTER), zoom_start=zoom, tiles="OpenStreetMap")
    for spec in markers:
        folium.Marker(
            [spec.lat, spec.lng],
            popup=folium.Popup(spec.popup, max_width=300),
            tooltip=spec.facility_id or spec.popup,
            icon=folium.Icon(color=spec.color),
        ).add_to(m)
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(out))
    return str(out)


def export_csv(facilities: Sequence[Facility], path: str = "facilities.csv") -> str:
    rows = [f.model_dump() for f in facilities]
    for row in rows:
        row["services"] = "; ".join(row["services"])
    columns = list(Facility.model_fields)
    pd.DataFrame(rows, columns=columns).to_csv(path, index=False)
    return path
