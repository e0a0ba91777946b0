"""Распознавание формата файла хранилища и миграция старого формата.

Старый формат: плоский словарь ``fieldId -> text``. Текущий формат: объект
с ключами ``users``, ``fields`` и числовым ``version``.
"""
from dataclasses import dataclass
from typing import Any, Dict, Union

from story_planner.domains.documents.entities import Document, Segment, User
from story_planner.db.exceptions import StorageCorruptedError


MIGRATED_USER_ID = "user_migrated"
MIGRATED_USER_NAME = "Earlier author"
MIGRATED_USER_COLOR = "#888888"


@dataclass(frozen=True)
class CurrentShape:
    payload: Dict[str, Any]


@dataclass(frozen=True)
class LegacyShape:
    entries: Dict[str, Any]


def is_current_shape(raw: Dict[str, Any]) -> bool:
    version = raw.get("version")
    return (
        isinstance(raw.get("users"), dict)
        and isinstance(raw.get("fields"), dict)
        # JS-клиенты могут записать версию как 5.0
        and isinstance(version, (int, float))
        and not isinstance(version, bool)
    )


def decode_shape(raw: Any) -> Union[CurrentShape, LegacyShape]:
    """Однократная классификация прочитанного JSON"""
    if not isinstance(raw, dict):
        raise StorageCorruptedError(
            f"Stored document must be a JSON object, got {type(raw).__name__}"
        )
    if is_current_shape(raw):
        return CurrentShape(payload=raw)
    return LegacyShape(entries=raw)


def migrate_legacy(entries: Dict[str, Any]) -> Document:
    """Перенос плоского словаря в текущий формат.

    Каждая непустая строка становится полем из одного сегмента синтетического
    пользователя ``user_migrated``. Остальные значения отбрасываются.
    """
    migrated_user = User(
        user_id=MIGRATED_USER_ID,
        name=MIGRATED_USER_NAME,
        color=MIGRATED_USER_COLOR
    )

    fields = {
        field_id: [Segment(user_id=MIGRATED_USER_ID, text=value)]
        for field_id, value in entries.items()
        if isinstance(value, str) and value
    }

    return Document(users={MIGRATED_USER_ID: migrated_user}, fields=fields, version=1)
