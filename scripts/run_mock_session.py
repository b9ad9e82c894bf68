"""
Mock Session Run

Drives the stress engine over a synthetic sell-off and prints the
stress timeline, high-stress periods and critical events.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import argparse
import logging

from analysis import run_session, find_high_stress_periods, level_summary, detect_level_transitions
from detector import CriticalEventLog, StateLabeler, StressEngine
from market import generate_stress_event_ticks


def main():
    parser = argparse.ArgumentParser(description="Run the stress engine over a synthetic sell-off")
    parser.add_argument('--ticks', type=int, default=600, help='Total ticks to generate')
    parser.add_argument('--event-tick', type=int, default=400, help='First stressed tick')
    parser.add_argument('--event-length', type=int, default=60, help='Stressed ticks')
    parser.add_argument('--threshold', type=float, default=75, help='High-stress score threshold')
    parser.add_argument('--output', help='Optional CSV path for the per-tick timeline')
    parser.add_argument('--verbose', action='store_true', help='Log per-tick scoring')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    ticks = generate_stress_event_ticks(
        event_tick=args.event_tick,
        event_length=args.event_length,
        ticks=args.ticks
    )

    engine = StressEngine()
    df, events = run_session(ticks, engine)

    log = CriticalEventLog()
    for event in events:
        log.append(event)

    print(f"Processed {len(df)} ticks")
    if df.empty:
        print("No ticks to analyze")
        return

    print(f"Peak score: {df['score'].max()}")
    print(f"Current state: {StateLabeler().format_state_alert(df['score'].iloc[-1])}")

    print("\nLevel distribution:")
    for level, info in level_summary(df).items():
        print(f"  {level}: {info['count']} ticks ({info['percentage']}%)")

    transitions = detect_level_transitions(df)
    print(f"\nLevel transitions: {len(transitions)}")
    if not transitions.empty:
        print(transitions.head(10).to_string(index=False))

    periods = find_high_stress_periods(df, threshold=args.threshold)
    print(f"\nHigh-stress periods (score ≥ {args.threshold:.0f}): {len(periods)}")
    if not periods.empty:
        print(periods.to_string(index=False))

    print(f"\nCritical events: {len(log)}")
    for event in log.events():
        factor = getattr(event.primary_factor, 'value', event.primary_factor)
        print(f"  [{event.id}] {event.level.value} score={event.stress_score} catalyst={factor}")
        if event.narrative:
            print(f"      {event.narrative}")

    if engine.last_trace is not None:
        print(f"\nLast decision trace:\n  {engine.last_trace.audit_narrative}")

    if args.output:
        df.to_csv(args.output, index=False)
        print(f"\n✓ Saved timeline to {args.output}")


if __name__ == "__main__":
    main()
