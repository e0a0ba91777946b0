from fastapi import APIRouter, Depends, HTTPException, status

from story_planner.api.http.errors import to_response
from story_planner.core.auth import require_admin
from story_planner.core.config import settings
from story_planner.core.dependencies import get_store
from story_planner.core.security import verify_password, create_admin_token
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.schemas import (
    AdminLogin, Token, FieldOverwrite, MutationResponse
)
from story_planner.domains.documents.services import DocumentService

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/login", response_model=Token)
def login(login_data: AdminLogin):
    """Вход администратора по паролю"""
    if not settings.admin_password_hash:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured"
        )

    if not verify_password(login_data.password, settings.admin_password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(access_token=create_admin_token())


@router.delete("/users/{user_id}", response_model=MutationResponse)
def delete_user(
    user_id: str,
    store: DocumentStore = Depends(get_store),
    admin: dict = Depends(require_admin)
):
    """Удаление пользователя (сегменты в полях остаются)"""
    document_service = DocumentService(store)
    return to_response(document_service.delete_user(user_id))


@router.put("/fields/{field_id}", response_model=MutationResponse)
def overwrite_field(
    field_id: str,
    overwrite_data: FieldOverwrite,
    store: DocumentStore = Depends(get_store),
    admin: dict = Depends(require_admin)
):
    """Замена поля без проверки чужих сегментов"""
    document_service = DocumentService(store)

    result = document_service.overwrite_field(
        field_id,
        [segment.to_payload() for segment in overwrite_data.segments]
    )
    return to_response(result)


@router.delete("/fields/{field_id}", response_model=MutationResponse)
def clear_field(
    field_id: str,
    store: DocumentStore = Depends(get_store),
    admin: dict = Depends(require_admin)
):
    """Удаление поля целиком"""
    document_service = DocumentService(store)
    return to_response(document_service.clear_field(field_id))
