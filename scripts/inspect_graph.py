#!/usr/bin/env python3
"""Inspect the concept graph served by an archive API.

Usage:
    python scripts/inspect_graph.py [--base-url URL] [--limit N]
    python scripts/inspect_graph.py --steps 10
    python scripts/inspect_graph.py --play
    python scripts/inspect_graph.py --concept <concept-id> [--enrich]

Loads the graph into a headless view, prints the time axis and how the
visible graph grows across the range, and optionally shows a concept panel.
"""

import argparse
import asyncio
import logging
import sys

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def print_header(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


async def run(args: argparse.Namespace) -> int:
    from cerebro.client import ArchiveClient
    from cerebro.config import settings
    from cerebro.errors import EnrichmentFailure
    from cerebro.graph import HeadlessRenderer
    from cerebro.models import from_epoch_ms
    from cerebro.presentation import format_panel
    from cerebro.view import GraphView

    if args.limit:
        settings.graph_limit = args.limit

    client = ArchiveClient(base_url=args.base_url)
    renderer = HeadlessRenderer()
    view = GraphView(client, renderer)

    try:
        await view.mount()
        if view.load_error is not None:
            print(f"Graph load failed: {view.load_error}")
            return 1

        graph = view.store.graph
        print_header("GRAPH")
        print(f"Concepts: {len(graph.concepts)}")
        print(f"Edges:    {len(graph.edges)} ({len(renderer.elements.edges)} renderable)")

        if view.is_empty:
            print("No concepts extracted yet")
            return 0

        low, high = view.time_range
        print(f"Time axis: {from_epoch_ms(low).isoformat()} -> {from_epoch_ms(high).isoformat()}")

        print_header("LEGEND")
        counts: dict[str, int] = {}
        for concept in graph.concepts:
            counts[concept.category] = counts.get(concept.category, 0) + 1
        for category, label, color in view.legend:
            print(f"  {label:<8} {color}  {counts.get(category, 0)}")

        if args.play:
            print_header("PLAYBACK")
            done = asyncio.Event()
            last_tick = -1

            def report(_cursor: float) -> None:
                nonlocal last_tick
                vis = view.visibility
                if view.playback.tick_count != last_tick and vis is not None:
                    last_tick = view.playback.tick_count
                    print(
                        f"  tick {last_tick:>3}  {from_epoch_ms(vis.cursor).isoformat()}  "
                        f"{len(vis.concept_ids):>4} concepts  {len(vis.edge_ids):>4} edges"
                    )
                if not view.playback.is_playing:
                    done.set()

            original = view.playback.on_cursor_change

            def on_cursor(cursor: float) -> None:
                original(cursor)
                report(cursor)

            view.playback.on_cursor_change = on_cursor
            view.play()
            await done.wait()
        else:
            print_header("TIMELINE")
            steps = max(args.steps, 1)
            for i in range(steps + 1):
                cursor = view.scrub(low + (high - low) * i / steps)
                vis = view.visibility
                print(
                    f"  {from_epoch_ms(cursor).isoformat()}  "
                    f"{len(vis.concept_ids):>4} concepts  {len(vis.edge_ids):>4} edges"
                )

        if args.concept:
            detail = await view.select(args.concept)
            if detail is None:
                print(f"\nConcept {args.concept} could not be loaded")
                return 1
            if args.enrich:
                try:
                    await view.enrich_selected()
                except EnrichmentFailure as e:
                    print(f"\nEnrichment failed: {e}")
            print_header("CONCEPT")
            print(format_panel(view.panel))

        return 0
    finally:
        await view.unmount()
        await client.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect the cerebro concept graph")
    parser.add_argument("--base-url", default=None, help="Archive API root (default from settings)")
    parser.add_argument("--limit", type=int, default=None, help="Max concepts to load")
    parser.add_argument("--steps", type=int, default=10, help="Timeline sample points")
    parser.add_argument("--play", action="store_true", help="Run real-time playback instead of sampling")
    parser.add_argument("--concept", default=None, help="Concept id to show")
    parser.add_argument("--enrich", action="store_true", help="Enrich the concept before showing it")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
