# ABOUTME: Extraction package: model calls, JSON recovery, and structured guesses.
# ABOUTME: Exports the recovery entry point and the ExtractionResult/VisionItem types.

from bookscout.extraction.parsing import clamp_confidence, parse_extraction, parse_vision_items
from bookscout.extraction.recovery import FailureReason, RecoveryFailure, recover
from bookscout.extraction.types import ExtractionResult, ModelResponse, VisionItem

__all__ = [
    "ExtractionResult",
    "FailureReason",
    "ModelResponse",
    "RecoveryFailure",
    "VisionItem",
    "clamp_confidence",
    "parse_extraction",
    "parse_vision_items",
    "recover",
]
