"""
Run the investor portal API on port 3005 (the default notification_url points here).
Usage: python3 run.py
"""
import uvicorn

from config import settings

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=3005,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
