#!/usr/bin/env python3
"""
Launch script for the CNV Header Reader backend.

Usage:
    python run_server.py [data_folder] [--port PORT] [--host HOST]

Examples:
    python run_server.py                    # Use default ./data/cnv folder
    python run_server.py /path/to/casts     # Use custom folder
    python run_server.py --sample-data      # Generate demo casts first
"""

import argparse
import os
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="CNV Header Reader Server")
    parser.add_argument(
        "data_folder",
        nargs="?",
        default="./data/cnv",
        help="Path to folder containing CNV files (default: ./data/cnv)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Write synthetic casts into the data folder before starting"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    data_folder = Path(args.data_folder)

    print("CNV Header Reader")
    print("=" * 40)
    print(f"Data folder: {data_folder.absolute()}")
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    if args.sample_data:
        from cnv_reader.utils.sample_data import generate_test_data_set
        files = generate_test_data_set(data_folder)
        print(f"Generated {len(files)} sample casts")

    if not data_folder.is_dir():
        print(f"\nWarning: Data folder is not a directory: {data_folder}")
        print("You can set it later via POST /folder")

    # Configure data folder for FastAPI lifespan
    if data_folder.is_dir():
        os.environ["CNV_DATA_FOLDER"] = str(data_folder)

    print("\nAPI Endpoints:")
    print("  GET  /                         - Health check")
    print("  GET  /health                   - Detailed health")
    print("  GET  /folder                   - Current folder info")
    print("  POST /folder                   - Set data folder")
    print("  GET  /headers                  - List all headers")
    print("  GET  /headers/{id}             - Get parsed header")
    print("  GET  /headers/{id}/metrics/{n} - Get one column descriptor")
    print("  POST /headers/parse            - Parse posted header text")
    print("  GET  /metrics                  - Column descriptor catalog")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "cnv_reader.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
