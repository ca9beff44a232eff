"""
Local launcher for PharmaDesk.

Runs the variant master API under uvicorn, waits until it answers, then
runs the Streamlit admin UI against it. Ctrl+C stops both.

    python start.py [--backend-only]
"""

import os
import sys
import time
import signal
import argparse
import subprocess
from pathlib import Path

import requests
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent
load_dotenv(PROJECT_ROOT / ".env")

API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
UI_PORT = int(os.getenv("FRONTEND_PORT", "8501"))
API_URL = f"http://{API_HOST}:{API_PORT}"


class Launcher:
    """Owns the child processes and tears them down together."""

    def __init__(self):
        self.children = []

    def spawn(self, name: str, cmd: list, env: dict = None) -> subprocess.Popen:
        child = subprocess.Popen(cmd, cwd=str(PROJECT_ROOT), env=env)
        self.children.append((name, child))
        return child

    def run_api(self):
        print(f"[api] {API_URL}")
        cmd = [
            sys.executable, "-m", "uvicorn", "backend.main:app",
            "--host", API_HOST, "--port", str(API_PORT),
        ]
        if os.getenv("DEBUG"):
            cmd.append("--reload")
        return self.spawn("api", cmd)

    def run_ui(self):
        print(f"[ui] http://localhost:{UI_PORT}")
        env = dict(os.environ)
        # The UI reads API_BASE_URL; default it to the API started above
        env.setdefault("API_BASE_URL", API_URL)
        return self.spawn("ui", [
            sys.executable, "-m", "streamlit", "run", "frontend/app.py",
            "--server.port", str(UI_PORT),
            "--server.headless", "true",
        ], env=env)

    def api_ready(self, timeout: float = 30) -> bool:
        """True once the liveness endpoint returns 200 within ``timeout``."""
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            try:
                if requests.get(f"{API_URL}/api/v1/health/live", timeout=2).ok:
                    return True
            except requests.exceptions.RequestException:
                pass
            time.sleep(0.5)
        return False

    def first_exited(self):
        for name, child in self.children:
            if child.poll() is not None:
                return name, child.returncode
        return None

    def stop(self):
        for name, child in reversed(self.children):
            if child.poll() is None:
                print(f"[{name}] stopping")
                child.terminate()
                try:
                    child.wait(timeout=5)
                except subprocess.TimeoutExpired:
                    child.kill()


def main():
    parser = argparse.ArgumentParser(description="Run PharmaDesk locally")
    parser.add_argument("--backend-only", action="store_true", help="run the API without the admin UI")
    args = parser.parse_args()

    launcher = Launcher()

    def on_signal(signum, frame):
        launcher.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    launcher.run_api()
    if not launcher.api_ready():
        print("[api] did not become ready within 30s")
        launcher.stop()
        sys.exit(1)

    if not args.backend_only:
        launcher.run_ui()
    print(f"API docs at {API_URL}/docs, Ctrl+C to stop")

    while True:
        exited = launcher.first_exited()
        if exited:
            print(f"[{exited[0]}] exited with code {exited[1]}")
            launcher.stop()
            sys.exit(exited[1] or 1)
        time.sleep(1)


if __name__ == "__main__":
    main()
