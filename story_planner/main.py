from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
import os

from story_planner.api.http.health import router as health_router
from story_planner.api.http.documents import router as documents_router
from story_planner.api.http.users import router as users_router
from story_planner.api.http.fields import router as fields_router
from story_planner.api.http.admin import router as admin_router
from story_planner.core.config import settings
from story_planner.db.exceptions import StorageCorruptedError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

PAGE_NAME = "story_planner.html"

app = FastAPI(
    title="Story Planner",
    description="Совместное редактирование плана истории",
    version="1.0.0"
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем статические файлы без кэширования
if os.path.isdir(settings.static_dir):
    class NoCacheStaticFiles(StaticFiles):
        async def get_response(self, path: str, scope):
            response = await super().get_response(path, scope)
            if response:
                response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
                response.headers["Pragma"] = "no-cache"
                response.headers["Expires"] = "0"
            return response

    app.mount("/static", NoCacheStaticFiles(directory=settings.static_dir), name="static")

# Подключаем роутеры
app.include_router(health_router)
app.include_router(documents_router)
app.include_router(users_router)
app.include_router(fields_router)
app.include_router(admin_router)


@app.exception_handler(StorageCorruptedError)
async def storage_corrupted_handler(request: Request, exc: StorageCorruptedError):
    logger.error(f"Storage corrupted while handling {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Stored document is corrupted"}
    )


@app.get("/")
@app.get(f"/{PAGE_NAME}")
async def root():
    """Главная страница планировщика"""
    page_path = os.path.join(settings.static_dir, PAGE_NAME)
    if os.path.exists(page_path):
        return FileResponse(page_path, media_type="text/html")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Frontend not found"}
    )
