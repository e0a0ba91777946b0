from story_planner.domains.documents.entities import (
    Document, Segment, User, SYSTEM_USER_ID, SEED_FIELD_ID
)
from story_planner.domains.documents.merge import (
    MergeOutcome, propose_save, is_exempt_author, CONFLICT_MESSAGE
)
from story_planner.domains.documents.schemas import (
    SegmentSchema, UserUpsert, FieldSave, FieldOverwrite,
    MutationResponse, VersionResponse, AdminLogin, Token
)

__all__ = [
    "Document", "Segment", "User", "SYSTEM_USER_ID", "SEED_FIELD_ID",
    "MergeOutcome", "propose_save", "is_exempt_author", "CONFLICT_MESSAGE",
    "SegmentSchema", "UserUpsert", "FieldSave", "FieldOverwrite",
    "MutationResponse", "VersionResponse", "AdminLogin", "Token"
]
