"""Запуск сервера: python -m roomrelay"""
import uvicorn

from .config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(
        "roomrelay.main:app",
        host=config.host,
        port=config.port,
        log_level="debug" if config.debug else "info",
    )


if __name__ == "__main__":
    main()
