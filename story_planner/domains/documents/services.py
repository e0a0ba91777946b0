from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence
import logging

from story_planner.db.repositories.document_repository import DocumentStore
from story_planner.domains.documents.entities import Document, Segment, User
from story_planner.domains.documents.merge import propose_save

logger = logging.getLogger(__name__)


class ResultKind(Enum):
    """Исход операции над документом"""
    OK = "ok"
    BAD_INPUT = "bad_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ServiceResult:
    kind: ResultKind
    message: str = ""
    version: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    @classmethod
    def success(cls, version: int) -> "ServiceResult":
        return cls(kind=ResultKind.OK, version=version)

    @classmethod
    def bad_input(cls, message: str) -> "ServiceResult":
        return cls(kind=ResultKind.BAD_INPUT, message=message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceResult":
        return cls(kind=ResultKind.CONFLICT, message=message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult":
        return cls(kind=ResultKind.NOT_FOUND, message=message)


def _is_identifier(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _coerce_segments(raw_segments: Any) -> List[Segment]:
    """Приведение входных сегментов (объектов или словарей) к Segment"""
    if not isinstance(raw_segments, (list, tuple)):
        raise ValueError("Segments must be a list")
    return [
        raw if isinstance(raw, Segment) else Segment.from_dict(raw)
        for raw in raw_segments
    ]


class DocumentService:
    """Сервис операций над общим документом.

    Каждая мутация выполняется под блокировкой хранилища: загрузка,
    вычисление, запись. При любом отказе документ не изменяется.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def get_document(self) -> Document:
        """Текущее состояние документа"""
        return self.store.load()

    def get_version(self) -> int:
        """Текущая версия документа"""
        return self.store.load().version

    def upsert_user(self, user_id: str, name: str, color: str) -> ServiceResult:
        """Регистрация пользователя; повторная регистрация перезаписывает данные"""
        if not _is_identifier(user_id):
            return ServiceResult.bad_input("userId is required")
        if not isinstance(name, str) or not isinstance(color, str):
            return ServiceResult.bad_input("name and color must be strings")

        with self.store.lock():
            document = self.store.load()
            document.users[user_id] = User(user_id=user_id, name=name, color=color)
            return self._commit(document, f"Upserted user {user_id}")

    def delete_user(self, user_id: str) -> ServiceResult:
        """Удаление пользователя без удаления его сегментов"""
        with self.store.lock():
            document = self.store.load()
            if user_id not in document.users:
                return ServiceResult.not_found(f"User {user_id} not found")

            del document.users[user_id]
            return self._commit(document, f"Deleted user {user_id}")

    def save_field(
        self,
        user_id: str,
        field_id: str,
        proposed_segments: Sequence[Any]
    ) -> ServiceResult:
        """Сохранение поля пользователем с проверкой чужих сегментов"""
        if not _is_identifier(user_id):
            return ServiceResult.bad_input("userId is required")
        if not _is_identifier(field_id):
            return ServiceResult.bad_input("fieldId is required")
        try:
            segments = _coerce_segments(proposed_segments)
        except ValueError as e:
            return ServiceResult.bad_input(str(e))

        with self.store.lock():
            document = self.store.load()
            outcome = propose_save(document.get_field(field_id), user_id, segments)

            if not outcome.accepted:
                logger.warning(
                    f"Rejected save of field {field_id} by {user_id}: "
                    f"{len(outcome.violations)} foreign segments missing"
                )
                return ServiceResult.conflict(outcome.reason)

            document.replace_field(field_id, outcome.segments)
            return self._commit(
                document,
                f"User {user_id} saved field {field_id} ({len(document.render_field(field_id))} chars)"
            )

    def overwrite_field(self, field_id: str, segments: Sequence[Any]) -> ServiceResult:
        """Безусловная замена поля администратором"""
        if not _is_identifier(field_id):
            return ServiceResult.bad_input("fieldId is required")
        try:
            new_segments = _coerce_segments(segments)
        except ValueError as e:
            return ServiceResult.bad_input(str(e))

        with self.store.lock():
            document = self.store.load()
            document.replace_field(field_id, new_segments)
            return self._commit(document, f"Admin overwrote field {field_id}")

    def clear_field(self, field_id: str) -> ServiceResult:
        """Удаление поля целиком"""
        with self.store.lock():
            document = self.store.load()
            if field_id not in document.fields:
                return ServiceResult.not_found(f"Field {field_id} not found")

            del document.fields[field_id]
            return self._commit(document, f"Admin cleared field {field_id}")

    def _commit(self, document: Document, description: str) -> ServiceResult:
        version = document.bump_version()
        self.store.save(document)
        logger.info(f"{description} (version {version})")
        return ServiceResult.success(version)
