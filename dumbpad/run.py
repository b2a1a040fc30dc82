"""
DumbPad Backend — Server Entry Point
======================================

What:  `dumbpad` console script / `python -m dumbpad.run`.
How:   Binds uvicorn to HOST and PORT from Settings and serves dumbpad.main:app.
"""

import uvicorn

from dumbpad.config import settings


def main() -> None:
    uvicorn.run(
        "dumbpad.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
