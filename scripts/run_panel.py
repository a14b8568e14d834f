import argparse
import datetime
import logging
import os
import sys

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from config.settings import LOGS_DIR, RANDOM_SEED
from core.series import TimeRange
from ui.panel import ChartPanel


def _configure_logging():
    """Configure file logging for headless panel runs."""
    os.makedirs(LOGS_DIR, exist_ok=True)

    log_file = os.path.join(LOGS_DIR, "panel.log")
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)


def main(argv: list[str] | None = None):
    _configure_logging()
    logger = logging.getLogger("pricepanel.runner")

    parser = argparse.ArgumentParser(description="Render the price chart panel without a browser")
    parser.add_argument(
        "--range",
        dest="time_range",
        choices=[item.value for item in TimeRange],
        default=None,
        help="Time range to select after mount (default: keep 1w)",
    )
    parser.add_argument("--compare", action="store_true", help="Show the comparison overlay")
    parser.add_argument("--hover", type=int, default=None, help="1-based point index to draw the crosshair at")
    parser.add_argument("--seed", type=int, default=RANDOM_SEED, help="Seed for reproducible mock data")
    parser.add_argument(
        "--output",
        default=os.path.join(BASE_DIR, "reports", "panel.html"),
        help="Standalone HTML file to write",
    )
    args = parser.parse_args(argv)

    start_time = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Run started at %s", start_time.isoformat())

    exit_code = 0
    with ChartPanel(rng=args.seed) as panel:
        if args.time_range:
            panel.select_time_range(args.time_range)
        if args.compare and not panel.toggle_comparison():
            logger.warning("Comparison unavailable: %s", panel.notice)
        if args.hover is not None:
            panel.hover(args.hover)

        view = panel.render()
        if view.figure is None:
            exit_code = 1
            logger.error("Nothing to render: %s", view.placeholder)
            print(f"Nothing to render: {view.placeholder}")
        else:
            os.makedirs(os.path.dirname(os.path.abspath(args.output)), exist_ok=True)
            view.figure.write_html(args.output, include_plotlyjs="cdn")
            logger.info("Wrote %s (%s, %s)", args.output, view.state.time_range.value, view.price_text)
            print(f"Chart saved to {args.output}")

    end_time = datetime.datetime.now(datetime.timezone.utc)
    logger.info("Run ended at %s", end_time.isoformat())
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
