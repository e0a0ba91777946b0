from fastapi import APIRouter, Depends

from story_planner.api.http.errors import to_response
from story_planner.core.dependencies import get_store
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.schemas import UserUpsert, MutationResponse
from story_planner.domains.documents.services import DocumentService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=MutationResponse)
def upsert_user(
    user_data: UserUpsert,
    store: DocumentStore = Depends(get_store)
):
    """Регистрация или перезапись пользователя"""
    document_service = DocumentService(store)

    result = document_service.upsert_user(
        user_data.user_id,
        user_data.name,
        user_data.color
    )
    return to_response(result)
