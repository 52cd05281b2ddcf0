from collections.abc import Callable
from typing import Any
from typing import Protocol
from typing import TypeVar

from repodash.models.repository import RepositorySnapshot


class RepositoryScoped(Protocol):
    repo_full_name: str


T = TypeVar('T', bound=RepositoryScoped)


def group_by_repository(
    repositories: list[RepositorySnapshot],
    items: list[T],
    filter_fn: Callable[[T], bool] | None = None,
    key: Callable[[T], Any] | None = None,
    reverse: bool = False,
) -> dict[str, list[T]]:
    """
    Partition items by repository full name.

    Every repository gets an entry, empty when nothing matches. The filter
    runs before the sort; sorting is stable and input order is kept when no
    key is given.
    """
    grouped: dict[str, list[T]] = {repo.full_name: [] for repo in repositories}
    for item in items:
        bucket = grouped.get(item.repo_full_name)
        if bucket is None:
            continue
        if filter_fn is None or filter_fn(item):
            bucket.append(item)

    if key is not None:
        for bucket in grouped.values():
            bucket.sort(key=key, reverse=reverse)
    return grouped
