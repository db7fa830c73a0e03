#!/usr/bin/env python
"""
Quick run of the FastAPI app without Docker.

Run: python run_api.py

Then open browser: http://localhost:8000/docs
"""
import logging

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    uvicorn.run(
        "dfp.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
