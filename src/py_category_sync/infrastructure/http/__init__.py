from .repository import HttpCategoryRepository, is_duplicate_response

__all__ = ["HttpCategoryRepository", "is_duplicate_response"]
