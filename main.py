"""Server Entry Point - Root Module.

Run with `python main.py` or `uvicorn main:app`.
It imports from the quakeview package.
"""

from quakeview.main import app, run

__all__ = [
    "app",
    "run",
]

if __name__ == "__main__":
    run()
