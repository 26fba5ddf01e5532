# todo_api/__main__.py

from __future__ import annotations

import uvicorn

from todo_api.config import get_settings
from todo_api.logging_setup import setup_logging
from todo_api.main import create_app


def main() -> None:
    settings = get_settings()
    setup_logging(level=settings.log_level, log_dir=settings.log_dir)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
