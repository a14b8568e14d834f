#!/usr/bin/env python3
"""Price panel self-check: data cycles, fullscreen normalization and log health."""

import os
import sys

# Add project to path
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config.settings import LOGS_DIR, POINT_COUNT
from core.fullscreen import FULLSCREEN_CHANGE_EVENTS, BrowserFullscreenBridge
from core.series import TimeRange
from ui.panel import ChartPanel


def check_generation_cycles():
    """Cycle every time range and verify the settled dataset shape."""
    print("\n📊 Generation Cycle Report")
    print("=" * 70)

    failures = 0
    with ChartPanel(rng=0) as panel:
        for time_range in TimeRange:
            panel.select_time_range(time_range)
            snapshot = panel.state.snapshot()
            dataset = snapshot.dataset
            if snapshot.is_loading or dataset is None or dataset.comparison is None:
                failures += 1
                print(f"  ✗ {time_range.value:5} | no dataset ({snapshot.error})")
                continue

            base_len = len(dataset.base)
            comparison_len = len(dataset.comparison)
            ok = base_len == comparison_len == POINT_COUNT
            if not ok:
                failures += 1
            status = "✓" if ok else "✗"
            print(f"  {status} {time_range.value:5} | base={base_len:3} | comparison={comparison_len:3}")

    print(f"\n  Ranges failing: {failures} / {len(TimeRange)}")
    return failures == 0


def check_fullscreen_events():
    """Every vendor exit event must collapse into a single changed(False)."""
    print("\n🖥  Fullscreen Event Normalization")
    print("=" * 70)

    all_ok = True
    for event_name in FULLSCREEN_CHANGE_EVENTS:
        bridge = BrowserFullscreenBridge()
        with ChartPanel(bridge, rng=0) as panel:
            received = []
            panel.fullscreen.on_change(received.append)
            bridge.dispatch("fullscreenchange", panel.fullscreen.element)
            received.clear()
            bridge.dispatch(event_name, None)
            ok = received == [False] and not panel.state.is_fullscreen
        all_ok = all_ok and ok
        print(f"  {'✓' if ok else '✗'} {event_name:24} -> {received}")

    return all_ok


def check_logs():
    """Show recent log entries."""
    print("\n📋 Recent Log Entries (last 10)")
    print("=" * 70)

    log_file = os.path.join(LOGS_DIR, "ui.log")
    if not os.path.exists(log_file):
        print("  No log file found yet.")
        return True

    try:
        with open(log_file, "r", encoding="utf-8") as f:
            lines = f.readlines()[-10:]
    except OSError as e:
        print(f"  Error reading logs: {e}")
        return False

    for line in lines:
        print(f"  {line.rstrip()}")
    return True


def main():
    """Run all checks."""
    print("\n" + "=" * 70)
    print("  Price Panel Health Check")
    print("=" * 70)

    checks = [
        ("Generation Cycles", check_generation_cycles),
        ("Fullscreen Events", check_fullscreen_events),
        ("Log Health", check_logs),
    ]

    all_pass = True
    for name, check_func in checks:
        try:
            if not check_func():
                all_pass = False
        except Exception as e:
            print(f"\n❌ {name} check failed: {e}")
            all_pass = False

    print("\n" + "=" * 70)
    if all_pass:
        print("✓ All checks passed. Panel is healthy!")
    else:
        print("⚠ Some checks failed. Review above for details.")
    print("=" * 70 + "\n")

    return 0 if all_pass else 1


if __name__ == "__main__":
    sys.exit(main())
