from .document_store import DocumentStore, create_store

__all__ = ["DocumentStore", "create_store"]
