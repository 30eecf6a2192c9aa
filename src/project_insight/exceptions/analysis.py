"""Analysis-related exceptions."""

from .base import ProjectInsightError


class AnalysisError(ProjectInsightError):
    """Base class for analysis-related errors."""
    pass


class SeedCompositionError(AnalysisError):
    """Raised when two transform recipes claim the same parameter or transform.

    Only raised under the ``"error"`` seed collision policy; the default
    policy keeps the first claim and drops later ones.
    """

    def __init__(self, originator: str, kind: str, name: str):
        super().__init__(
            f"Transform recipe from '{originator}' redeclares {kind} '{name}'",
            details={"originator": originator, "kind": kind, "name": name},
        )
        self.originator = originator
        self.kind = kind
        self.name = name
