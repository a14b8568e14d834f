import sys

from config import settings
from ui.app import create_app
from ui.panel import ChartPanel


def main():
    """
    Price Panel Entry Point.
    Mounts the chart panel and serves the local dashboard.
    """
    print("📈 Price Panel - Chart Dashboard Initializing...")
    print(f"🌐 Serving on http://{settings.HOST}:{settings.PORT}")

    with ChartPanel(rng=settings.RANDOM_SEED) as panel:
        create_app(panel).run(host=settings.HOST, port=settings.PORT, debug=False)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n🛑 Execution interrupted by user.")
        sys.exit(0)
    except Exception as e:
        print(f"\n🔥 Fatal System Error: {e}")
        sys.exit(1)
