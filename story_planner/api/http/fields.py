from fastapi import APIRouter, Depends

from story_planner.api.http.errors import to_response
from story_planner.core.dependencies import get_store
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.schemas import FieldSave, MutationResponse
from story_planner.domains.documents.services import DocumentService

router = APIRouter(prefix="/api/fields", tags=["fields"])


@router.put(
    "/{field_id}",
    response_model=MutationResponse,
    responses={409: {"description": "Another user's text would be lost"}}
)
def save_field(
    field_id: str,
    save_data: FieldSave,
    store: DocumentStore = Depends(get_store)
):
    """Сохранение поля с проверкой чужих сегментов"""
    document_service = DocumentService(store)

    result = document_service.save_field(
        save_data.user_id,
        field_id,
        [segment.to_payload() for segment in save_data.segments]
    )
    return to_response(result)
