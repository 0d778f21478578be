"""
Development entry point.

    python main.py

Production deployments run `uvicorn app.main:app` directly.
"""
import uvicorn

from config.config import settings

if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=settings.DEBUG)
