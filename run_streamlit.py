"""
Launcher script for the lecture summarizer Streamlit dashboard.
"""

import os
import argparse
import subprocess
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()


def build_command(app_path: Path, port: int):
    """Build the streamlit command line for the dashboard."""
    return [
        "streamlit", "run", str(app_path),
        "--server.port", str(port),
        "--server.headless", "true",
        "--server.maxUploadSize", "2048",
        "--browser.gatherUsageStats", "false",
    ]


def main():
    """Launch the Streamlit dashboard with command line options."""
    parser = argparse.ArgumentParser(description="Lecture Video Summarizer dashboard")
    parser.add_argument("--port", type=int, default=8501, help="Port to run Streamlit on")
    parser.add_argument("--server-port", type=int, default=8000, help="Port where the FastAPI server is running")
    parser.add_argument("--api-url", help="URL of the API server (default: http://localhost:<server-port>)")
    args = parser.parse_args()

    root_dir = Path(__file__).parent.absolute()
    app_path = root_dir / "lecture_summarizer" / "frontend" / "streamlit_app.py"

    env = os.environ.copy()
    api_url = args.api_url or f"http://localhost:{args.server_port}"
    env["API_URL"] = api_url

    # streamlit runs the app as a script, so the package root must be importable
    env["PYTHONPATH"] = str(root_dir) + os.pathsep + env.get("PYTHONPATH", "")

    print(f"Starting Lecture Video Summarizer dashboard on port {args.port}")
    print(f"API server is expected to be running at: {api_url}")

    try:
        subprocess.run(build_command(app_path, args.port), env=env, check=True)
    except KeyboardInterrupt:
        print("Streamlit app stopped")
    except (OSError, subprocess.CalledProcessError) as e:
        print(f"Error running Streamlit app: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
