"""Проверка безопасного сохранения поля.

Клиент присылает полный новый список сегментов. Сохранение принимается,
только если каждый чужой сегмент (не автора запроса и не системный)
присутствует в новом списке с тем же автором и тем же текстом. Позиция не
важна, сравнение строгое, без нормализации.
"""
from dataclasses import dataclass, field
from typing import List, Sequence

from story_planner.domains.documents.entities import Segment, SYSTEM_USER_ID


CONFLICT_MESSAGE = "Cannot delete or modify another user's text"


@dataclass(frozen=True)
class MergeOutcome:
    """Результат проверки: принято с новыми сегментами или отклонено с причиной"""
    accepted: bool
    segments: List[Segment] = field(default_factory=list)
    reason: str = ""
    violations: List[Segment] = field(default_factory=list)

    @classmethod
    def accept(cls, segments: Sequence[Segment]) -> "MergeOutcome":
        return cls(accepted=True, segments=list(segments))

    @classmethod
    def reject(cls, reason: str, violations: Sequence[Segment] = ()) -> "MergeOutcome":
        return cls(accepted=False, reason=reason, violations=list(violations))


def is_exempt_author(author_id: str, submitting_user_id: str) -> bool:
    """Сегменты самого автора запроса и системные сегменты не защищены"""
    return author_id == submitting_user_id or author_id == SYSTEM_USER_ID


def find_violations(
    existing_segments: Sequence[Segment],
    submitting_user_id: str,
    proposed_segments: Sequence[Segment]
) -> List[Segment]:
    """Чужие сегменты, которых нет в предложенном списке"""
    present = {segment.key for segment in proposed_segments}
    return [
        segment for segment in existing_segments
        if not is_exempt_author(segment.user_id, submitting_user_id)
        and segment.key not in present
    ]


def propose_save(
    existing_segments: Sequence[Segment],
    submitting_user_id: str,
    proposed_segments: Sequence[Segment]
) -> MergeOutcome:
    """Решение о приеме полной замены сегментов поля"""
    violations = find_violations(existing_segments, submitting_user_id, proposed_segments)
    if violations:
        return MergeOutcome.reject(CONFLICT_MESSAGE, violations)
    return MergeOutcome.accept(proposed_segments)
