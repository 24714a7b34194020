from .service import ObjectStorageService

__all__ = ["ObjectStorageService"]
