from fastapi import APIRouter, Depends

from story_planner.core.dependencies import get_store
from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.schemas import VersionResponse
from story_planner.domains.documents.services import DocumentService

router = APIRouter(prefix="/api", tags=["documents"])


@router.get("/data")
def get_document(store: DocumentStore = Depends(get_store)):
    """Полное состояние общего документа"""
    document_service = DocumentService(store)
    return document_service.get_document().to_dict()


@router.get("/version", response_model=VersionResponse)
def get_version(store: DocumentStore = Depends(get_store)):
    """Текущая версия для опроса изменений"""
    document_service = DocumentService(store)
    return VersionResponse(version=document_service.get_version())
