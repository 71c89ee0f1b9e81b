"""Exception types for scenecut.

All errors subclass ValueError so callers that only care about "bad input"
can catch one type. The subclasses separate the kinds of failure:

  - StructuralError: the project shape is wrong (no clips, empty clip,
    scenes not a list, unreadable document). Aborts load/save.
  - FieldValidationError: one field is malformed or out of range. The
    model is never mutated when this is raised.
  - OrderingError: a scene's end is not after its start.

Continuity gaps are not errors; see continuity.ContinuityWarning.
"""


class SceneCutError(ValueError):
    """Base error carrying an optional clip/scene context prefix."""

    def __init__(self, message: str, context: str | None = None):
        self.message = message
        self.context = context
        super().__init__(self._render())

    def _render(self) -> str:
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message

    def with_context(self, prefix: str) -> "SceneCutError":
        """Prepend an outer identity (e.g. 'Clip "Intro"') and return self.

        Called at each level an error passes through, so the innermost
        context ends up last: 'Clip "Intro", scene 2: end must be ...'.
        """
        self.context = f"{prefix}, {self.context}" if self.context else prefix
        self.args = (self._render(),)
        return self

    def __str__(self) -> str:
        return self._render()


class StructuralError(SceneCutError):
    pass


class FieldValidationError(SceneCutError):
    pass


class OrderingError(SceneCutError):
    pass
