from gitarena.models.core import Group, Repository, User

__all__ = ["User", "Group", "Repository"]
