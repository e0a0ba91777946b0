import uvicorn

from story_planner.core.config import settings


def main() -> None:
    """Запуск сервера"""
    uvicorn.run(
        "story_planner.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    main()
