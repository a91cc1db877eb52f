#!/usr/bin/env python3
"""
Run the FastAPI backend server.

Usage:
    python run_api.py

Set RAIL_DATASET_PATH to load a dataset other than data/MA_rail_lines.geojson.
"""

import uvicorn

from config.settings import DATASET_PATH

if __name__ == "__main__":
    print("🚆 Starting Railway Path Builder API server...")
    print(f"🗺️  Dataset: {DATASET_PATH}")
    print("📡 API will be available at: http://localhost:8000")
    print("📚 Documentation at: http://localhost:8000/docs")
    print("🛑 Press CTRL+C to stop\n")

    # When using reload=True, we need to pass the app as a string import path
    # instead of the actual app object
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True  # Enable auto-reload during development
    )
