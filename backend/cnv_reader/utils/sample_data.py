"""
Sample data generator for testing.

Generates realistic-looking CTD casts in Sea-Bird CNV format: a marker-prefixed
header block followed by ascii data rows.
"""

from datetime import datetime
from pathlib import Path

import numpy as np


def build_cnv_header(
    station: str,
    lat: float,
    lng: float,
    recorded_at: datetime,
    n_values: int,
    ship: str = "RV Cabo de Hornos",
) -> list[str]:
    """Header block lines of a processed SBE 9 cast, terminator included."""
    return [
        "* Sea-Bird SBE 9 Data File:",
        f"* FileName = C:\\data\\{station}.hex",
        "* Software Version Seasave V 7.26.7.107",
        "* Temperature SN = 5952",
        "* Conductivity SN = 4261",
        "* System UpLoad Time = " + recorded_at.strftime("%b %d %Y %H:%M:%S"),
        f"* NMEA Latitude = {lat:.4f}",
        f"* NMEA Longitude = {lng:.4f}",
        "* NMEA UTC (Time) = " + recorded_at.strftime("%b %d %Y %H:%M:%S"),
        "* Store Lat/Lon Data = Append to Every Scan",
        f"** Ship: {ship}",
        f"** Station: {station}",
        "** Operator: EDR",
        "* ds",
        "# nquan = 4",
        f"# nvalues = {n_values}",
        "# units = specified",
        "# name 0 = prDM: Pressure, Digiquartz [db]",
        "# name 1 = t090C: Temperature [ITS-90, deg C]",
        "# name 2 = sal00: Salinity, Practical [PSU]",
        "# name 3 = flag:  0.000e+00",
        "# interval = decibars: 1",
        "# start_time = " + recorded_at.strftime("%b %d %Y %H:%M:%S") + " [NMEA time, header]",
        "# bad_flag = -9.990e-29",
        "# file_type = ascii",
        "*END*",
    ]


def generate_cast(
    output_path: Path,
    lat: float = -33.0246,
    lng: float = -71.6312,
    recorded_at: datetime = datetime(2015, 11, 27, 17, 55, 23),
    max_depth_db: int = 200,
    surface_temp_c: float = 16.5,
    deep_temp_c: float = 9.0,
) -> Path:
    """
    Generate a downcast binned at 1 db.

    Temperature decays from the surface value towards the deep value;
    salinity rises slightly with depth.
    """
    pressure = np.arange(1, max_depth_db + 1, dtype=np.float64)
    n_values = len(pressure)

    temperature = deep_temp_c + (surface_temp_c - deep_temp_c) * np.exp(-pressure / 60.0)
    temperature += np.random.normal(0, 0.02, n_values)

    salinity = 34.2 + 0.4 * (1 - np.exp(-pressure / 80.0))
    salinity += np.random.normal(0, 0.005, n_values)

    lines = build_cnv_header(output_path.stem, lat, lng, recorded_at, n_values)
    for i in range(n_values):
        lines.append(
            f"{pressure[i]:11.3f}"
            f"{temperature[i]:11.4f}"
            f"{salinity[i]:11.4f}"
            f"{0.0:11.3e}"
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write('\n'.join(lines) + '\n')

    return output_path


def generate_test_data_set(output_folder: Path) -> list[Path]:
    """Generate a set of test casts along a coastal transect."""
    output_folder.mkdir(parents=True, exist_ok=True)

    files = []

    files.append(generate_cast(
        output_folder / "st01_coastal.cnv",
        lat=-33.0246,
        lng=-71.6312,
        recorded_at=datetime(2015, 11, 27, 17, 55, 23),
        max_depth_db=80,
    ))

    files.append(generate_cast(
        output_folder / "st02_shelf.cnv",
        lat=-33.0500,
        lng=-71.9000,
        recorded_at=datetime(2015, 11, 28, 9, 12, 5),
        max_depth_db=200,
    ))

    files.append(generate_cast(
        output_folder / "st03_offshore.cnv",
        lat=-33.1000,
        lng=-72.5000,
        recorded_at=datetime(2015, 11, 29, 14, 40, 0),
        max_depth_db=500,
        deep_temp_c=6.5,
    ))

    return files


if __name__ == "__main__":
    # Generate test data when run directly
    output = Path("./data/cnv")
    files = generate_test_data_set(output)
    print(f"Generated {len(files)} test files in {output}")
    for f in files:
        print(f"  - {f.name}")
