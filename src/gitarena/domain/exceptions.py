class GitArenaError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnknownEntityKindError(GitArenaError):
    """An entity kind outside user/group/repository was requested."""
