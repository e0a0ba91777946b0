from story_planner.db.repositories.document_repository import DocumentStore

__all__ = ["DocumentStore"]
