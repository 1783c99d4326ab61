"""
Web 진입점

실행 방법:
    python -m web
    LEDGER_CONFIG=/path/to/ledger.yaml python -m web
"""

import uvicorn

from core.config.loader import get_settings
from core.logging import setup_logging
from web.app import create_app


def main() -> None:
    settings = get_settings()
    setup_logging("web", console_level=settings.log_level, file_level=settings.log_level)

    uvicorn.run(
        create_app(settings.config),
        host=settings.address,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
