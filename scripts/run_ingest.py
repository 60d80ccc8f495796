"""
Demo script: process a TRR report via the public API.

Usage:
    python scripts/run_ingest.py                     # all TRR files under inputs/
    python scripts/run_ingest.py --ingest            # rebuild from outputs/trrconfig.yaml
    python scripts/run_ingest.py path/a.CSV path/b.CSV

File names follow the ``TRR-YYYYMMDD.NN.VVV.CSV`` convention, so sorting
them puts the report's files in sequence order. On the first run init()
parses the files, writes the config, and builds the outputs. With
--ingest the existing config is reloaded and the outputs rebuilt.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

INPUT_GLOB = "inputs/TRR-*.CSV"

OUTPUT_ROOT = Path("outputs")
CONFIG_PATH = OUTPUT_ROOT / "trrconfig.yaml"

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_ingest")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    import trr_ingest

    args = [a for a in sys.argv[1:] if not a.startswith("--")]

    if "--ingest" in sys.argv:
        log.info("Rebuilding from %s", CONFIG_PATH)
        written = trr_ingest.ingest(config_path=str(CONFIG_PATH))
    else:
        input_paths = args or sorted(str(p) for p in Path(".").glob(INPUT_GLOB))
        if not input_paths:
            log.warning("No input files found (looked for %s)", INPUT_GLOB)
            return

        log.info("=" * 70)
        for path in input_paths:
            log.info("Input: %s", path)
        log.info("  output_dir  : %s", OUTPUT_ROOT)
        log.info("  config_path : %s", CONFIG_PATH)
        log.info("=" * 70)

        trr_ingest.init(
            input_paths,
            output_dir=str(OUTPUT_ROOT),
            config_path=str(CONFIG_PATH),
        )
        written = sorted(str(p) for p in OUTPUT_ROOT.glob("*") if p != CONFIG_PATH)

    for path in written:
        log.info("  wrote %s", path)
    log.info("Done.")


if __name__ == "__main__":
    main()
