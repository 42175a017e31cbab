#!/usr/bin/env python3
import asyncio
import time

import click

from nearcare.core.store import LocalStore
from nearcare.finder import FacilityFinder, default_finder
from nearcare.filtering import facility_type_label
from nearcare.geolocation import FixedLocator, IPLocator
from nearcare.visualize.visualize import export_csv


def format_table(finder: FacilityFinder, limit=None) -> str:
    rows = finder.nearest(limit) if limit else finder.visible
    if not rows:
        return "No facilities found. Try adjusting your filters."
    lines = [f"Found {len(rows)} facilities"]
    for f in rows:
        mark = "*" if finder.selection.is_selected(f.id) else " "
        dist = f"{f.distance:6.2f} km" if f.distance is not None else "      -  "
        lines.append(f"{mark} {f.id:>12}  {dist}  {facility_type_label(f.type):<20}  {f.name}")
    return "\n".join(lines)


# -----------------------------
# Async runner
# -----------------------------
async def run_pipeline(
    finder: FacilityFinder,
    directory=False,
    live=False,
    types=(),
    selected=(),
    search="",
    place=None,
    map_path=None,
    csv_path=None,
    nearest_n=None,
    verbose=False,
):
    start_time = time.time()

    # Step 1: candidate list
    if directory:
        await finder.load_directory()

    # Step 2: locate the user
    if finder.geolocation.locator is not None:
        await finder.use_current_location()

    # Step 3: live search around the user
    if live:
        await finder.find_nearby()

    # Step 4: filters and selection
    if types:
        finder.clear_types()
        for t in types:
            finder.toggle_type(t)
    for fid in selected:
        finder.toggle_facility(fid)
    finder.set_search_term(search)

    if place:
        await finder.search_place(place)

    if verbose:
        print(f"Time elapsed: {time.time() - start_time:.2f} seconds")
        print(f"{len(finder.candidates)} candidates, {len(finder.visible)} visible")

    # Step 5: report, map and export
    for n in finder.notices:
        prefix = "!" if n.variant == "destructive" else "-"
        click.echo(f"{prefix} {n.title}: {n.description}")
    click.echo(format_table(finder, nearest_n))

    if map_path:
        click.echo(f"Map written to {finder.render_map(map_path)}")
    if csv_path:
        click.echo(f"CSV written to {export_csv(finder.visible, csv_path)}")
    finder.close()


# -----------------------------
# CLI entry point
# -----------------------------
@click.command()
@click.option("--lat", type=float, default=None, help="Your latitude (skips automatic location)")
@click.option("--lng", type=float, default=None, help="Your longitude")
@click.option("--locate", is_flag=True, default=False, help="Locate via the IP position service")
@click.option("--directory/--no-directory", default=False, help="Load the same-origin facility listing")
@click.option("--live/--no-live", default=False, help="Search OpenStreetMap for facilities nearby")
@click.option("--radius", type=int, default=None, help="Live search radius in meters")
@click.option("--type", "types", multiple=True, help="Facility type to show (repeatable)")
@click.option("--select", "selected", multiple=True, help="Facility id to highlight (repeatable)")
@click.option("--search", default="", help="Filter by name, address or service")
@click.option("--place", default=None, help="Recenter the map on a place name")
@click.option("--map", "map_path", default=None, help="Write an HTML map to this path")
@click.option("--csv", "csv_path", default=None, help="Write visible facilities to CSV")
@click.option("--nearest", "nearest_n", type=int, default=None, help="Only list the N nearest")
@click.option("--store", "store_path", default=None, help="Local store file")
@click.option("--verbose", is_flag=True, default=False, help="Enable progress logging")
def main(lat, lng, locate, directory, live, radius, types, selected, search, place,
         map_path, csv_path, nearest_n, store_path, verbose):
    """Find healthcare facilities near you, filter them and map them."""
    if (lat is None) != (lng is None):
        raise click.UsageError("--lat and --lng must be given together")

    locator = None
    if lat is not None:
        locator = FixedLocator(lat, lng)
    elif locate:
        locator = IPLocator()

    finder = default_finder(
        LocalStore(store_path), locator, locator_name="none", verbose=verbose, radius_m=radius
    )
    asyncio.run(
        run_pipeline(finder, directory, live, types, selected, search, place,
                     map_path, csv_path, nearest_n, verbose)
    )


if __name__ == "__main__":
    main()
