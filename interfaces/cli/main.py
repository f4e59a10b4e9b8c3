from __future__ import annotations

import asyncio
import logging

from config import LOG_LEVEL
from interfaces.engine_factory import build_engine
from moodsense.pipeline import events
from moodsense.pipeline.events import Event, EventBus


def _print_refined(event: Event) -> None:
    payload = event.payload
    print(f"  refined #{payload['sequence_number']}: {payload['ui_intensity']} ({payload['confidence']:.2f})")


def _print_transition(event: Event) -> None:
    payload = event.payload
    print(f"  ~ {payload['previous_mood']} → {payload['mood']}")


async def run_cli() -> None:
    bus = EventBus()
    bus.subscribe(events.REFINED_PUBLISHED, _print_refined)
    bus.subscribe(events.TRANSITION, _print_transition)
    engine = build_engine(event_bus=bus)
    print("MoodSense CLI. Type a message; /reset, /stats, 'exit' to quit.")

    while True:
        text = (await asyncio.to_thread(input, "> ")).strip()
        if text.lower() in {"exit", "quit", "q"}:
            await engine.wait_for_refinements()
            print("Bye.")
            break
        if not text:
            continue
        if text == "/reset":
            await engine.reset_context()
            print("Context cleared.")
            continue
        if text == "/stats":
            for name, value in engine.statistics().to_dict().items():
                print(f"  {name}: {value}")
            history = engine.recorder
            if history is not None and hasattr(history, "get_statistics"):
                stored = await history.get_statistics()
                print(f"  stored readings: {stored.total} (trend {stored.trend.value})")
            continue

        state = await engine.analyze(text)
        print(f"  fast: {state.ui_intensity.describe()} ({state.confidence:.2f})")


def main() -> None:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    asyncio.run(run_cli())


if __name__ == "__main__":
    main()
