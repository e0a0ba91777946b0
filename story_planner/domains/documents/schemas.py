from pydantic import BaseModel, Field, ConfigDict
from typing import List


class SegmentSchema(BaseModel):
    """Схема сегмента; дополнительные свойства клиента сохраняются"""
    user_id: str = Field(..., alias="userId", min_length=1)
    text: str

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class UserUpsert(BaseModel):
    """Схема для регистрации пользователя"""
    user_id: str = Field(..., alias="userId", min_length=1, max_length=200)
    name: str = Field(..., max_length=100)
    color: str = Field(..., max_length=50)

    model_config = ConfigDict(populate_by_name=True)


class FieldSave(BaseModel):
    """Схема для сохранения поля пользователем"""
    user_id: str = Field(..., alias="userId", min_length=1)
    segments: List[SegmentSchema]

    model_config = ConfigDict(populate_by_name=True)


class FieldOverwrite(BaseModel):
    """Схема для замены поля администратором"""
    segments: List[SegmentSchema]


class MutationResponse(BaseModel):
    ok: bool = True
    version: int


class VersionResponse(BaseModel):
    version: int


class AdminLogin(BaseModel):
    password: str


class Token(BaseModel):
    """Схема для токена администратора"""
    access_token: str
    token_type: str = "bearer"
