"""gitshelf exception hierarchy.

All gitshelf-specific exceptions inherit from ShelfError.
"""


class ShelfError(Exception):
    """Base exception for all gitshelf errors."""


class RepositoryNotFoundError(ShelfError):
    """Raised when no repository is registered under a sanitized name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Repository not found: {name}")


class InvalidRefError(ShelfError):
    """Raised when a ref name or object id does not resolve to a commit."""

    def __init__(self, ref: str, reason: str = "") -> None:
        self.ref = ref
        self.reason = reason
        msg = f"Invalid ref: {ref!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ObjectNotFoundError(ShelfError):
    """Raised when a resolved object id has no backing object.

    Usually storage corruption, a shallow clone, or an id that names
    an object of the wrong kind (e.g. a blob where a commit is expected).
    """

    def __init__(self, oid: str, expected: str | None = None) -> None:
        self.oid = oid
        self.expected = expected
        if expected:
            super().__init__(f"Object not found: {oid} (expected {expected})")
        else:
            super().__init__(f"Object not found: {oid}")


class TagNotFoundError(ShelfError):
    """Raised when a tag lookup fails."""

    def __init__(self, tag_name: str) -> None:
        self.tag_name = tag_name
        super().__init__(f"Tag not found: {tag_name}")


class PathNotFoundError(ShelfError):
    """Raised when a path does not exist under a given root tree."""

    def __init__(self, path: str, root_oid: str | None = None) -> None:
        self.path = path
        self.root_oid = root_oid
        super().__init__(f"Path not found: {path!r}")


class EmptyRepositoryError(ShelfError):
    """Raised when a default branch is needed but the repository has none."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Repository has no branches: {name}")
