"""Analysis-related exceptions: file access, parsing, traversal limits."""

from .base import CodePulseError


class AnalysisError(CodePulseError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file's current content cannot be read."""

    def __init__(self, identity: str, reason: str):
        super().__init__(
            f"Cannot access file: {identity}",
            details={"identity": identity, "reason": reason},
        )
        self.identity = identity
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when source text cannot be turned into a syntax tree."""

    def __init__(self, language: str, reason: str):
        super().__init__(
            f"Failed to parse {language} source",
            details={"language": language, "reason": reason},
        )
        self.language = language
        self.reason = reason


class TraversalBudgetExceeded(AnalysisError):
    """Raised when a syntax-tree walk visits more nodes than allowed."""

    def __init__(self, language: str, budget: int):
        super().__init__(
            f"Syntax tree walk exceeded {budget} nodes",
            details={"language": language, "budget": budget},
        )
        self.language = language
        self.budget = budget
