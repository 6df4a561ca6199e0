"""Status tree models — the in-memory result of parsing a progress stream.

Two shapes of the same node:

``StepStatus``
    Mutable.  Owned exclusively by ``ProgressParser``, which creates nodes on
    first mention and updates their scalar fields line by line.
``StepSnapshot``
    Frozen copy handed to readers (renderers, CLI).  Never aliased with the
    parser's tree, so a render can never observe a half-applied update.
"""

from __future__ import annotations

import copy
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict


class StepStatus(BaseModel):
    """One node of the live status tree.

    The root node has no ``title``, ``contribution`` or ``idx``.
    """

    progress: float | None = None
    pos: int | float | None = None
    max: int | None = None
    message: str | None = None
    title: str | None = None
    contribution: float | None = None
    data: Any = None
    idx: int | None = None
    steps: dict[str, StepStatus] = {}

    def child(self, name: str) -> StepStatus:
        """Return the child *name*, creating it with the next ``idx``."""
        node = self.steps.get(name)
        if node is None:
            node = StepStatus(idx=len(self.steps))
            self.steps[name] = node
        return node

    def aggregate(self) -> None:
        """Recompute ``progress`` from contributing children.

        Only children with both a progress value and a non-zero contribution
        take part.  The sum is not renormalized.
        """
        total = 0.0
        for step in self.steps.values():
            if step.progress is not None and step.contribution:
                total += step.progress * step.contribution
        self.progress = total

    def snapshot(self) -> StepSnapshot:
        """Deep, frozen copy of this node and its descendants."""
        return StepSnapshot(
            progress=self.progress,
            pos=self.pos,
            max=self.max,
            message=self.message,
            title=self.title,
            contribution=self.contribution,
            data=copy.deepcopy(self.data),
            idx=self.idx,
            steps={name: step.snapshot() for name, step in self.steps.items()},
        )


class StepSnapshot(BaseModel):
    """Frozen, point-in-time view of a status node."""

    model_config = ConfigDict(frozen=True)

    progress: float | None = None
    pos: int | float | None = None
    max: int | None = None
    message: str | None = None
    title: str | None = None
    contribution: float | None = None
    data: Any = None
    idx: int | None = None
    steps: dict[str, StepSnapshot] = {}

    def ordered_steps(self) -> list[StepSnapshot]:
        """Children in declaration order."""
        return sorted(self.steps.values(), key=lambda s: s.idx or 0)

    def find(self, step_id: str) -> StepSnapshot | None:
        """Look up a descendant by dotted step id (``"a.b"``)."""
        node: StepSnapshot | None = self
        for name in step_id.split("."):
            if node is None:
                return None
            node = node.steps.get(name)
        return node

    def walk(self) -> Iterator[tuple[str, StepSnapshot]]:
        """Yield ``(step_id, node)`` for every descendant, depth first."""
        stack: list[tuple[str, StepSnapshot]] = [
            (name, step) for name, step in reversed(self.ordered_steps_with_names())
        ]
        while stack:
            step_id, node = stack.pop()
            yield step_id, node
            for name, child in reversed(node.ordered_steps_with_names()):
                stack.append((f"{step_id}.{name}", child))

    def ordered_steps_with_names(self) -> list[tuple[str, StepSnapshot]]:
        """``(name, child)`` pairs in declaration order."""
        return sorted(self.steps.items(), key=lambda item: item[1].idx or 0)

    @property
    def is_complete(self) -> bool:
        """Whether this node reports full progress."""
        return self.progress is not None and self.progress >= 1.0
