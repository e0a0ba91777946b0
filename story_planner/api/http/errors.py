from fastapi import HTTPException, status

from story_planner.domains.documents.schemas import MutationResponse
from story_planner.domains.documents.services import ServiceResult, ResultKind

STATUS_BY_KIND = {
    ResultKind.BAD_INPUT: status.HTTP_400_BAD_REQUEST,
    ResultKind.CONFLICT: status.HTTP_409_CONFLICT,
    ResultKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def to_response(result: ServiceResult) -> MutationResponse:
    """Преобразование результата сервиса в ответ или HTTP-ошибку"""
    if not result.ok:
        raise HTTPException(
            status_code=STATUS_BY_KIND[result.kind],
            detail=result.message
        )
    return MutationResponse(version=result.version)
