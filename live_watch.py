"""Live watch: connect to a temple's snapshot stream and print each push."""

import asyncio
import json
import sys

import websockets


HOST = "localhost"
TEMPLE_ID = sys.argv[1] if len(sys.argv) > 1 else "somnath"
SIMULATION_URI = f"ws://{HOST}:8000/ws/temples/{TEMPLE_ID}/simulation"


def _bar(value: int, peak: int, width: int = 40) -> str:
    return "#" * (round(width * value / peak) if peak else 0)


async def watch(pushes: int = 3):
    """Print *pushes* snapshot frames, then disconnect."""
    async with websockets.connect(SIMULATION_URI) as ws:
        print(f"[SIM] Connected to {SIMULATION_URI}\n")

        for _ in range(pushes):
            data = json.loads(await ws.recv())
            if data.get("type") == "error":
                print(f"[SIM] Error: {data.get('detail')}")
                return

            snap = data["snapshot"]
            status = snap["currentStatus"]

            print("=" * 70)
            print(f"[SIM] {data['templeId']} on {data['date']}")
            print("=" * 70)
            print(f"  Expected now: {status['expectedVisitors']}")
            print(f"  Actual now:   {status.get('actualVisitors')}")

            # Hourly curve
            hourly = snap["hourlyData"]
            peak = max((h["expectedVisitors"] for h in hourly), default=0)
            print("\n  --- HOURLY ---")
            for h in hourly:
                print(f"  {h['hour']:02d}h {h['expectedVisitors']:>5} {_bar(h['expectedVisitors'], peak)}")

            # Areas
            print("\n  --- AREAS ---")
            for area in snap["areas"]:
                print(
                    f"  {area['name']:<15} {area['occupancy']:>4}/{area['capacity']:<4}"
                    f" {area['occupancyPercentage']:>4}%  [{area['density']}]"
                )

            # Wait
            wait = data.get("waitEstimate")
            if wait:
                print(f"\n  Wait: ~{wait['minutes']} min ({wait['level']})")
            else:
                print("\n  Wait: n/a (no slot capacity configured)")
            print()


if __name__ == "__main__":
    asyncio.run(watch())
