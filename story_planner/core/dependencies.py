from story_planner.core.config import settings
from story_planner.db.repositories.document_repository import DocumentStore

# Один экземпляр на процесс: его блокировка общая для всех запросов
store = DocumentStore(settings.data_file)


# Функция для dependency injection в FastAPI
def get_store() -> DocumentStore:
    return store
