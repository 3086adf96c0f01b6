"""Value objects package."""
from .recognition import AnalysisSummary, ObjectReference, RecognitionOutcome

__all__ = ["AnalysisSummary", "ObjectReference", "RecognitionOutcome"]
