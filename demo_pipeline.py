#!/usr/bin/env python3
"""
Complete Pipeline Demo: ALE → Table → CSV → Table, plus a JSON preset

Shows the full workflow:
1. Parse an Avid Log Exchange log
2. Export the clips as CSV (one-shot and streaming)
3. Read the CSV back
4. Save and load a preset
"""

import sys
import tempfile
from pathlib import Path

from structext.ale_parser import parse_ale_string
from structext.backends import create_writer, write_table
from structext.config import configure_logging, load_settings
from structext.csv_parser import parse_csv_file
from structext.presets import PresetStore

SAMPLE_ALE = """Heading
FIELD_DELIM\tTABS
VIDEO_FORMAT\t1080
FPS\t25

Column
Name\tTracks\tStart\tComments

Data
A001C003\tV\t01:00:00:00\tWide shot, take 2
A001C004\tA1A2\t01:00:10:00\t
"""


def main():
    settings = load_settings(sys.argv[1] if len(sys.argv) > 1 else None)
    configure_logging(settings)
    workdir = Path(tempfile.mkdtemp(prefix="structext_demo_"))

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: ALE → Table → CSV → Table → Preset")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse ALE
    # =========================================================================
    print("\n1. PARSING ALE...")
    table, err = parse_ale_string(SAMPLE_ALE)
    if err:
        print(f"   ✗ {err}")
        return 1
    print(f"   ✓ Columns: {table.headers}")
    print(f"   ✓ Records: {len(table)}")
    print(f"   ✓ Heading: {table.metadata}")

    # =========================================================================
    # STEP 2: Export CSV
    # =========================================================================
    print("\n2. EXPORTING CSV...")
    csv_path = workdir / "clips.csv"
    ok, err = write_table(str(csv_path), table, settings.write_options())
    print(f"   {'✓' if ok else '✗'} {csv_path}" + (f" ({err})" if err else ""))

    stream_path = workdir / "numbers.csv"
    writer, err = create_writer(str(stream_path), ["n", "square"], settings.write_options())
    if writer is None:
        print(f"   ✗ {err}")
        return 1
    with writer:
        for n in range(10000):
            writer.write_row([n, n * n])
    print(f"   ✓ Streamed {writer.row_count} rows to {stream_path}")

    # =========================================================================
    # STEP 3: Read it back
    # =========================================================================
    print("\n3. READING CSV BACK...")
    restored = parse_csv_file(str(csv_path), settings.read_options())
    for record in restored.records:
        print(f"   {record}")

    # =========================================================================
    # STEP 4: Presets
    # =========================================================================
    print("\n4. PRESETS...")
    store = PresetStore(str(workdir / "demo_presets"), codec=settings.codec())
    ok, err = store.save("ALE to CSV", {"delimiter": settings.delimiter, "columns": table.headers})
    print(f"   {'✓' if ok else '✗'} Saved {store.preset_path('ALE to CSV')}")
    preset, err = store.load("ALE to CSV")
    print(f"   ✓ Loaded: {preset}" if preset is not None else f"   ✗ {err}")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
