"""Named, grouped predicates over class reflections.

Predicates registered under the same id form a group that passes if any of
its predicates passes. A candidate passes the pipeline only if every group
passes. Registering under distinct ids therefore ANDs conditions together,
while registering under one id ORs them.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from ulid import ULID

if TYPE_CHECKING:
    from .reflection import ClassReflection

Predicate = Callable[["ClassReflection"], bool]


class FilterPipeline:
    """Ordered map of filter ids to predicate groups.

    Examples:
        >>> pipeline = FilterPipeline()
        >>> pipeline.register(lambda r: r.is_abstract(), "kind")
        'kind'
        >>> pipeline.register(lambda r: r.is_interface(), "kind")  # OR
        'kind'
        >>> _ = pipeline.register(lambda r: r.has_method("handle"))  # AND
        >>> len(pipeline)
        2
    """

    def __init__(self) -> None:
        self._groups: dict[str, list[Predicate]] = {}

    def register(
        self, predicate: Predicate, filter_id: str | None = None, singular: bool = False
    ) -> str:
        """Add a predicate to a group.

        Args:
            predicate: Callable receiving a ClassReflection
            filter_id: Group to add to; a fresh id is generated when omitted
            singular: Replace the group's predicates instead of appending

        Returns:
            The id the predicate was registered under
        """
        if filter_id is None:
            filter_id = str(ULID())

        if singular or filter_id not in self._groups:
            self._groups[filter_id] = [predicate]
        else:
            self._groups[filter_id].append(predicate)
        return filter_id

    def remove(self, filter_id: str) -> None:
        self._groups.pop(filter_id, None)

    def has(self, filter_id: str) -> bool:
        return filter_id in self._groups

    def groups(self) -> dict[str, list[Predicate]]:
        return {filter_id: list(predicates) for filter_id, predicates in self._groups.items()}

    def evaluate(self, reflection: "ClassReflection") -> bool:
        """Check a candidate against every group.

        Args:
            reflection: Reflection of the candidate class

        Returns:
            True if each group has at least one passing predicate
        """
        return all(
            any(predicate(reflection) for predicate in predicates)
            for predicates in self._groups.values()
        )

    def __len__(self) -> int:
        return len(self._groups)
