"""Repository identifiers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str

    @classmethod
    def parse(cls, full_name: str) -> "RepositoryRef":
        """
        Split "owner/name" on the first slash.

        Nothing is validated here; a malformed name surfaces as a not-found
        error from the first call that uses it.
        """
        owner, _, name = full_name.partition("/")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def api_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name
