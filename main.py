"""
main.py — Timed quiz app entry point
"""

import os
import socket
import sys
import time
import threading
import logging
import traceback
import webbrowser

# ── package path (must stay at the top) ──────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, LOG_FILE, DEFAULT_HOST, DEFAULT_PORT
from api.config import DEFAULT_TIMEOUT

# ── logging ──────────────────────────────────────────────────────────────────
try:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler(sys.stdout)
        ]
    )
except PermissionError:
    # log file locked: console only
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)

# ── server and network utils ─────────────────────────────────────────────────

def _port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, port))
        except OSError:
            return False
        return True

def _find_free_port() -> int:
    if _port_is_free(DEFAULT_PORT):
        return DEFAULT_PORT
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]

def _wait_for_server(port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False

def _start_server(port: int) -> None:
    try:
        import uvicorn
        from api.app import create_app
        logger.info(f"Starting uvicorn - port: {port}")
        app = create_app()
        uvicorn.run(app, host=DEFAULT_HOST, port=port, log_level="error")
    except Exception:
        logger.error(f"Server error:\n{traceback.format_exc()}")

# ── main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    logger.info("=== Timed Quiz Application Started ===")
    os.chdir(BASE_DIR)

    port = _find_free_port()
    server_thread = threading.Thread(target=_start_server, args=(port,), daemon=True)
    server_thread.start()

    if _wait_for_server(port):
        logger.info("Server ready. Opening browser.")
        webbrowser.open(f"http://{DEFAULT_HOST}:{port}")

        # keep the main thread alive
        try:
            while True:
                time.sleep(10)
        except KeyboardInterrupt:
            logger.info("Stopped by user.")
    else:
        logger.error("Server did not start in time. Is another instance still running?")
        sys.exit(1)
