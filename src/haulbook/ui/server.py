"""
haulbook.ui.server
~~~~~~~~~~~~~~~~~~
Uvicorn launcher for the haulbook web API, started by ``haulbook ui``.
Interactive API docs are served at ``/docs``.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
import webbrowser

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

APP_PATH = "haulbook.ui.api:app"


def _open_browser(url: str, delay: float = 1.2) -> None:
    """Open ``url`` once uvicorn has had a moment to bind."""
    def _open():
        time.sleep(delay)
        webbrowser.open(url)
    threading.Thread(target=_open, daemon=True).start()


def launch(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
    open_browser: bool = True,
    log_level: str = "warning",
) -> None:
    """Serve the entries API with uvicorn until interrupted."""
    try:
        import uvicorn
    except ImportError:
        print(
            "[error] uvicorn is not installed.\n"
            "        Install the UI extras:  pip install haulbook[ui]",
            file=sys.stderr,
        )
        sys.exit(1)

    url = f"http://{host}:{port}"
    print(f"\n  haulbook API  →  {url}")
    print(f"  API docs      →  {url}/docs")
    print("  Press Ctrl+C to stop.\n")

    if open_browser:
        _open_browser(f"{url}/docs")

    logger.info("Serving %s on %s (reload=%s)", APP_PATH, url, reload)
    uvicorn.run(APP_PATH, host=host, port=port, reload=reload, log_level=log_level)


__all__ = ["launch"]
