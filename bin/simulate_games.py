"""Play headless all-AI rounds and report outcomes.

Runs rounds through GameSession with no pacing delay, so the full engine
(dealing, AI policy, claim resolution, scoring) is exercised exactly as in
a live session. Optionally saves a cProfile .prof file.

Usage:
    uv run python bin/simulate_games.py --rounds 50
    uv run python bin/simulate_games.py --rounds 20 --difficulty hard --seed <64 hex chars>
    uv run python bin/simulate_games.py --rounds 100 --profile
"""

from __future__ import annotations

import argparse
import asyncio
import cProfile
import logging
import statistics
import time
from collections import Counter
from pathlib import Path

from hkmahjong.logic.enums import Difficulty
from hkmahjong.logic.settings import GameSettings
from hkmahjong.logic.types import WinResult
from hkmahjong.session.manager import GameSession
from hkmahjong.session.settings import SessionSettings
from shared.logging import setup_logging

PROFILE_DIR = Path(__file__).resolve().parent.parent / "backend" / "profiles"


async def simulate(rounds: int, session_settings: SessionSettings) -> list[WinResult | None]:
    """Play rounds back to back; None marks a draw game."""
    session = GameSession(GameSettings(human_seat=None), session_settings)
    results: list[WinResult | None] = []
    await session.start()
    for played in range(rounds):
        if played:
            await session.next_round()
        await session.wait_idle()
        state = session.service.game_state
        if state is None or not session.is_round_over:
            raise RuntimeError(f"round {played} stalled in {state.round_state.phase if state else 'no game'}")
        result = state.round_state.result
        results.append(result if isinstance(result, WinResult) else None)
    session.close()
    return results


def _print_summary(results: list[WinResult | None], elapsed: float) -> None:
    wins = [r for r in results if r is not None]
    by_seat = Counter(r.winner_seat for r in wins)
    by_type = Counter(r.type.value for r in wins)
    hands = Counter(line.split(" +")[0] for r in wins for line in r.breakdown)

    print("=" * 60)
    print(f"Rounds: {len(results)}")
    print(f"Draw games: {len(results) - len(wins)}")
    print(f"Wins by seat: {dict(sorted(by_seat.items()))}")
    print(f"Wins by type: {dict(by_type)}")
    if wins:
        print(f"Median fan: {statistics.median(r.fan for r in wins)}")
        print(f"Max fan: {max(r.fan for r in wins)}")
    print(f"Elapsed: {elapsed:.3f}s ({len(results) / elapsed:.1f} rounds/sec)")
    print()
    print("Scoring elements:")
    for name, count in hands.most_common():
        print(f"  {count:>5}  {name}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate headless all-AI rounds")
    parser.add_argument("--rounds", type=int, default=20)
    parser.add_argument("--difficulty", type=Difficulty, default=Difficulty.MEDIUM, choices=list(Difficulty))
    parser.add_argument("--seed", default=None, help="64 hex chars for a reproducible run")
    parser.add_argument("--profile", action="store_true", help="save a cProfile .prof file")
    args = parser.parse_args()

    session_settings = SessionSettings(pacing_scale=0, difficulty=args.difficulty, seed=args.seed)
    log_file = setup_logging(session_settings.log_dir, level=logging.WARNING)
    if log_file is not None:
        print(f"Logging to: {log_file}")

    profiler = cProfile.Profile() if args.profile else None
    start = time.perf_counter()
    if profiler is not None:
        profiler.enable()
    results = asyncio.run(simulate(args.rounds, session_settings))
    if profiler is not None:
        profiler.disable()
    elapsed = time.perf_counter() - start

    _print_summary(results, elapsed)

    if profiler is not None:
        PROFILE_DIR.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d_%H-%M-%S")
        profile_file = PROFILE_DIR / f"simulate_{timestamp}.prof"
        profiler.dump_stats(str(profile_file))
        print(f"Profile saved to: {profile_file}")


if __name__ == "__main__":
    main()
