"""Compute a 3D clustered layout for one snapshot and write it as JSON.

This script:
1. Loads entities and relationships from a JSON file or the HTTP store
2. Extracts characteristics and groups entities into clusters
3. Seeds clusters on a sphere and relaxes positions
4. Writes nodes (with x/y/z), links, clusters and the framing camera pose

Input files look like {"entities": [...], "relationships": [...]}.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path
sys.path.insert(0, str(project_root / "src"))

from orrery.api.graph import snapshot_response
from orrery.layout import LayoutEngine
from orrery.models.entity import parse_datetime
from orrery.sources import HttpSource, InMemorySource, SourceError, TimeWindow

logger = logging.getLogger(__name__)


def load_source(args: argparse.Namespace) -> HttpSource | InMemorySource:
    """Pick the data source from the command line."""
    if args.input:
        with open(args.input, encoding="utf-8") as f:
            return InMemorySource.from_dict(json.load(f))
    return HttpSource(base_url=args.url)


def print_summary(data: dict) -> None:
    """Print cluster sizes and the bounding box."""
    print(f"Entities: {len(data['nodes'])}, links: {len(data['links'])}, dropped: {data['dropped_links']}")
    print(f"Clusters: {len(data['clusters'])}")
    for cluster in sorted(data["clusters"], key=lambda c: len(c["members"]), reverse=True)[:10]:
        print(f"  [{cluster['id']:3d}] {cluster['key']:<40} {len(cluster['members'])} members")

    if data["nodes"]:
        for axis in ("x", "y", "z"):
            values = [n[axis] for n in data["nodes"]]
            print(f"  {axis}: [{min(values):.1f}, {max(values):.1f}]")
    print(f"Layout computed in {data['duration_ms']:.1f}ms")


def main() -> bool:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Compute a clustered 3D layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/compute_layout.py --input snapshot.json            # Lay out a file
    python scripts/compute_layout.py --end 2023-06-01 -o layout.json  # Fetch from the store
        """,
    )
    parser.add_argument("--input", "-i", type=Path, help="Snapshot JSON file (default: fetch over HTTP)")
    parser.add_argument("--url", help="Store base URL (default: ORRERY_SOURCE_BASE_URL)")
    parser.add_argument("--start", help="Window start (ISO 8601)")
    parser.add_argument("--end", help="Window end (ISO 8601, default: now)")
    parser.add_argument("--iterations", type=int, help="Relaxation iterations")
    parser.add_argument("--seed", type=int, help="Random seed for member placement")
    parser.add_argument("--output", "-o", type=Path, help="Write the layout JSON here")

    args = parser.parse_args()

    if args.input and not args.input.exists():
        print(f"Error: File not found: {args.input}")
        return False

    window = TimeWindow(
        end=parse_datetime(args.end) or datetime.now(timezone.utc),
        start=parse_datetime(args.start),
    )

    source = load_source(args)
    try:
        print("Fetching snapshot...")
        entities = source.list_entities()
        relationships = source.list_relationships(window)
    except SourceError as e:
        logger.error(f"Could not fetch snapshot: {e}")
        return False

    print(f"Found {len(entities)} entities and {len(relationships)} relationships")

    engine = LayoutEngine(seed=args.seed)
    snapshot = engine.compute(entities, relationships, iterations=args.iterations)
    data = snapshot_response(snapshot)
    print_summary(data)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        print(f"Done! Layout written to {args.output}")

    return True


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(0 if main() else 1)
