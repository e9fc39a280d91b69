"""
Entry point kept for running the server with ``python main.py``.
"""

from access_relay.config import get_settings
from access_relay.main import app

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
