from schoolassist.repositories.base.base_repository import BaseRepository, PageResult

__all__ = ["BaseRepository", "PageResult"]
