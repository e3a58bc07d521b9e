"""Abstract revision resolver interface."""

from abc import ABC, abstractmethod


class RevisionResolver(ABC):
    """Turns a revision specifier into a concrete commit ID.

    Resolving a revision also proves that the backing store holds it, which
    is why callers resolve commit IDs they already know.
    """

    @abstractmethod
    async def resolve(self, repository: str, revision: str = "") -> str:
        """Resolve a revision to a commit ID.

        Args:
            repository: Repository identifier, e.g. "gitlab.com/acme/widgets".
            revision: Branch, tag or commit ID. Empty string means the
                default branch.

        Raises:
            CloneInProgressError: The store is still cloning the repository.
            RepoNotFoundError: The store does not know the repository.
            RevisionNotFoundError: The revision does not exist.
            ResolverError: Any other resolver failure.
        """
        ...
