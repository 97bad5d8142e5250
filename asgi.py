"""
asgi.py -- Application assembly for FleetGate.

Run with:  uvicorn asgi:app --reload
           python asgi.py          (binds HOST:PORT from settings, default 127.0.0.1:3000)
"""

import uvicorn

from api.main import app, settings

__all__ = ["app"]


def main() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
