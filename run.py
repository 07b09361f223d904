#!/usr/bin/env python3
"""Run the reference host."""
import uvicorn

from toolflow.api.dependencies import get_config

if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "toolflow.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=True,
    )
