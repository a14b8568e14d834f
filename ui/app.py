"""Local Flask shell that mounts the price chart panel and exposes its actions."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import sys
from typing import Any

from flask import Flask, got_request_exception, jsonify, render_template, request
from plotly.offline import get_plotlyjs

# Make `python ui/app.py` work without external PYTHONPATH setup.
THIS_DIR = Path(__file__).resolve().parent
PROJECT_DIR = THIS_DIR.parent
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from config.settings import HOST, LOG_LEVEL, LOGS_DIR, PORT, RANDOM_SEED
from core.errors import InvalidInput
from core.fullscreen import FULLSCREEN_CHANGE_EVENTS, FULLSCREEN_ERROR_EVENTS
from ui.api import parse_hover_index, parse_price, serialize_view
from ui.models import PLACEHOLDER_SECTIONS, TABS, HeaderViewModel, resolve_tab
from ui.panel import ChartPanel


UI_DIR = THIS_DIR
STATIC_DIR = UI_DIR / "static"

PLOTLY_VENDOR_RELATIVE_PATH = "vendor/plotly.min.js"
PLOTLY_VENDOR_PATH = STATIC_DIR / PLOTLY_VENDOR_RELATIVE_PATH


def _configure_ui_logger() -> logging.Logger:
    """Configure file logger shared by the UI app and the panel modules."""
    logs_dir = Path(LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "ui.log"

    logger = logging.getLogger("pricepanel")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    logger.propagate = False

    existing = None
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            existing = handler
            break

    if existing is None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        logger.addHandler(handler)

    return logging.getLogger("pricepanel.ui")


def _warn_if_multi_worker(logger: logging.Logger) -> None:
    """Log warning when likely deployed with multiple workers/processes."""
    worker_envs = {
        "WEB_CONCURRENCY": os.getenv("WEB_CONCURRENCY"),
        "GUNICORN_WORKERS": os.getenv("GUNICORN_WORKERS"),
        "WORKERS": os.getenv("WORKERS"),
    }
    for key, raw_value in worker_envs.items():
        if raw_value is None:
            continue
        try:
            workers = int(raw_value)
        except ValueError:
            continue
        if workers > 1:
            logger.warning(
                "Detected %s=%s. Run UI with a single worker; each worker would hold its own panel state.",
                key,
                raw_value,
            )
            return


def _write_plotly_bundle(logger: logging.Logger) -> None:
    if PLOTLY_VENDOR_PATH.exists():
        return
    try:
        PLOTLY_VENDOR_PATH.parent.mkdir(parents=True, exist_ok=True)
        PLOTLY_VENDOR_PATH.write_text(get_plotlyjs(), encoding="utf-8")
        logger.info("Wrote local Plotly bundle: %s", PLOTLY_VENDOR_PATH)
    except OSError as exc:
        logger.warning("Failed to write local Plotly bundle: %s", exc)


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def create_app(panel: ChartPanel | None = None, *, vendor_plotly: bool = True) -> Flask:
    """Create the Flask app and mount the chart panel (a fresh one unless given)."""
    app = Flask(
        __name__,
        template_folder=str(UI_DIR / "templates"),
        static_folder=str(STATIC_DIR),
    )
    app.config["TEMPLATES_AUTO_RELOAD"] = True
    app.config["SEND_FILE_MAX_AGE_DEFAULT"] = 86400

    logger = _configure_ui_logger()
    _warn_if_multi_worker(logger)
    if vendor_plotly:
        _write_plotly_bundle(logger)

    chart_panel = panel if panel is not None else ChartPanel(rng=RANDOM_SEED)
    chart_panel.mount()
    app.extensions["chart_panel"] = chart_panel
    header = HeaderViewModel()
    logger.info("UI app initialized")

    def _view_payload(status_code: int = 200):
        view = chart_panel.render()
        return jsonify(serialize_view(view, chart_panel.renderer)), status_code

    @app.errorhandler(InvalidInput)
    def invalid_input(error: InvalidInput):
        logger.warning("Rejected request %s %s: %s", request.method, request.path, error)
        return jsonify({"error": str(error)}), 400

    @app.route("/")
    def dashboard():
        """Dashboard shell: header, tab strip and the active section."""
        active_tab = resolve_tab(request.args.get("tab"))
        view = chart_panel.render() if active_tab == "chart" else None
        chart_html = None
        if view is not None and view.figure is not None:
            chart_html = chart_panel.renderer.to_html(view.figure)
        return render_template(
            "dashboard.html",
            header=header,
            tabs=TABS,
            active_tab=active_tab,
            placeholder=PLACEHOLDER_SECTIONS.get(active_tab),
            view=view,
            chart_html=chart_html,
            container_id=chart_panel.fullscreen.element,
            plotly_js=PLOTLY_VENDOR_RELATIVE_PATH,
            change_events=FULLSCREEN_CHANGE_EVENTS,
            error_events=FULLSCREEN_ERROR_EVENTS,
        )

    @app.route("/api/chart")
    def chart_view():
        return _view_payload()

    @app.route("/api/chart/range/<label>", methods=["POST"])
    def chart_range(label: str):
        """Switch time range; selecting the active range is a no-op."""
        chart_panel.select_time_range(label)
        return _view_payload()

    @app.route("/api/chart/comparison", methods=["POST"])
    def chart_comparison():
        if not chart_panel.toggle_comparison():
            return _view_payload(409)
        return _view_payload()

    @app.route("/api/chart/fullscreen", methods=["POST"])
    def chart_fullscreen():
        """Queue the platform command; the page confirms via fullscreen-event."""
        chart_panel.toggle_fullscreen()
        return _view_payload()

    @app.route("/api/chart/fullscreen-event", methods=["POST"])
    def chart_fullscreen_event():
        body = _json_body()
        event_name = str(body.get("event") or "")
        element = body.get("element") or None
        chart_panel.dispatch_platform_event(event_name, element)
        return _view_payload()

    @app.route("/api/chart/hover", methods=["POST"])
    def chart_hover():
        chart_panel.hover(parse_hover_index(_json_body().get("index")))
        return _view_payload()

    @app.route("/api/chart/tick", methods=["POST"])
    def chart_tick():
        chart_panel.tick(parse_price(_json_body().get("price")))
        return _view_payload()

    @app.route("/health")
    def health():
        snapshot = chart_panel.state.snapshot()
        return jsonify(
            {
                "status": "ok",
                "mounted": chart_panel.mounted,
                "phase": snapshot.phase.value,
                "time_range": snapshot.time_range.value,
            }
        )

    def _log_unhandled_exception(sender: Flask, exception: Exception, **_: Any) -> None:
        logger.exception("Unhandled UI exception: %s", exception)

    got_request_exception.connect(_log_unhandled_exception, app, weak=False)

    return app


if __name__ == "__main__":
    with ChartPanel(rng=RANDOM_SEED) as local_panel:
        create_app(local_panel).run(host=HOST, port=PORT, debug=False)
