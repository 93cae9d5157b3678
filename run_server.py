#!/usr/bin/env python3
"""Run the chytanka API server."""

import os

import uvicorn

from core.config import DEFAULT_SERVER_PORT


def main():
    port = int(os.environ.get('SERVER_PORT') or os.environ.get('PORT') or DEFAULT_SERVER_PORT)
    host = os.environ.get('SERVER_HOST', '0.0.0.0')
    print("Starting Chytanka API server...")
    print(f"API documentation available at: http://localhost:{port}/docs")
    uvicorn.run(
        "server.app:app",
        host=host,
        port=port,
        reload=os.environ.get('SERVER_RELOAD') == '1'
    )


if __name__ == "__main__":
    main()
