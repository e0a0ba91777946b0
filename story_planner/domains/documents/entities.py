from typing import Optional, List, Dict, Any


# Зарезервированный автор: его сегменты никем не защищены
SYSTEM_USER_ID = "system"

SEED_FIELD_ID = "a1_story"
SEED_TEXT = "Once upon a time..."


class Segment:
    """Атрибутированный фрагмент текста внутри поля"""

    def __init__(self, user_id: str, text: str, extra: Optional[Dict[str, Any]] = None):
        self.user_id = user_id
        self.text = text
        # Произвольные свойства клиента хранятся как есть
        self.extra = dict(extra or {})

    @property
    def key(self) -> tuple:
        """Пара (автор, текст), по которой сравниваются сегменты"""
        return (self.user_id, self.text)

    def to_dict(self) -> Dict[str, Any]:
        data = {"userId": self.user_id, "text": self.text}
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Segment":
        """Создание сегмента из JSON-объекта"""
        if not isinstance(data, dict):
            raise ValueError("Segment must be an object")

        user_id = data.get("userId")
        text = data.get("text")
        if not isinstance(user_id, str) or not user_id:
            raise ValueError("Segment userId must be a non-empty string")
        if not isinstance(text, str):
            raise ValueError("Segment text must be a string")

        extra = {k: v for k, v in data.items() if k not in ("userId", "text")}
        return cls(user_id=user_id, text=text, extra=extra)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Segment):
            return False
        return self.key == other.key and self.extra == other.extra

    def __repr__(self) -> str:
        return f"Segment(user_id={self.user_id}, text={self.text!r})"


class User:
    """Участник совместного редактирования"""

    def __init__(self, user_id: str, name: str, color: str, extra: Optional[Dict[str, Any]] = None):
        self.user_id = user_id
        self.name = name
        self.color = color
        self.extra = dict(extra or {})

    def to_dict(self) -> Dict[str, Any]:
        data = {"userId": self.user_id, "name": self.name, "color": self.color}
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, user_id: str, data: Any) -> "User":
        if not isinstance(data, dict):
            raise ValueError(f"User {user_id} must be an object")
        extra = {k: v for k, v in data.items() if k not in ("userId", "name", "color")}
        return cls(
            user_id=data.get("userId", user_id),
            name=data.get("name", ""),
            color=data.get("color", ""),
            extra=extra
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"User(user_id={self.user_id}, name={self.name})"


class Document:
    """Единственный общий документ: пользователи, поля и счетчик версий"""

    def __init__(
        self,
        users: Optional[Dict[str, User]] = None,
        fields: Optional[Dict[str, List[Segment]]] = None,
        version: int = 1,
        extra: Optional[Dict[str, Any]] = None
    ):
        self.users = users if users is not None else {}
        self.fields = fields if fields is not None else {}
        self.version = version
        # Неизвестные ключи верхнего уровня переживают перезапись файла
        self.extra = dict(extra or {})

    def get_field(self, field_id: str) -> List[Segment]:
        """Сегменты поля; отсутствующее поле считается пустым"""
        return list(self.fields.get(field_id, []))

    def replace_field(self, field_id: str, segments: List[Segment]) -> None:
        """Полная замена содержимого поля"""
        self.fields[field_id] = list(segments)

    def bump_version(self) -> int:
        """Увеличение версии на единицу после принятой мутации"""
        self.version += 1
        return self.version

    def render_field(self, field_id: str) -> str:
        """Текст поля в порядке сегментов"""
        return "".join(segment.text for segment in self.fields.get(field_id, []))

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "users": {user_id: user.to_dict() for user_id, user in self.users.items()},
            "fields": {
                field_id: [segment.to_dict() for segment in segments]
                for field_id, segments in self.fields.items()
            },
            "version": self.version
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        """Восстановление документа из текущего формата хранения"""
        users = {
            user_id: User.from_dict(user_id, raw)
            for user_id, raw in data["users"].items()
        }

        fields = {}
        for field_id, raw_segments in data["fields"].items():
            if not isinstance(raw_segments, list):
                raise ValueError(f"Field {field_id} must be a list of segments")
            fields[field_id] = [Segment.from_dict(raw) for raw in raw_segments]

        extra = {k: v for k, v in data.items() if k not in ("users", "fields", "version")}
        return cls(users=users, fields=fields, version=int(data["version"]), extra=extra)

    @classmethod
    def create_seed(cls) -> "Document":
        """Начальный документ с одним системным сегментом"""
        return cls(
            users={},
            fields={SEED_FIELD_ID: [Segment(user_id=SYSTEM_USER_ID, text=SEED_TEXT)]},
            version=1
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Document(version={self.version}, users={len(self.users)}, fields={len(self.fields)})"
