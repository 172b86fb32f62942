from .document_controller import DocumentController

__all__ = ["DocumentController"]
