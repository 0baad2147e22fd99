"""
Sub Translator - browser-driven subtitle translator with resumable output.

Features:
- Caption-by-caption translation through a web translation service
- Multi-line captions translated as one unit, dialogue lines kept apart
- Bounded retries with an ERROR marker for lines that never translate
- Output rewritten after every caption so interrupted runs resume
- Running-average remaining-time estimate
"""

__version__ = "1.0.0"

from .models import Caption, SubtitleDocument
from .parser import parse_srt, serialize_srt, load_srt, save_srt, validate_srt_file, SrtParseError
from .merger import merge_lines, split_lines, should_merge
from .resume import plan_resume, load_checkpoint, ResumePlan, CheckpointMismatchError
from .progress import ProgressEstimator, Estimate
from .browser_client import TranslationProvider, GoogleTranslateProvider, choose_candidate, create_provider
from .translator import SubtitleTranslator, translate_line, output_path_for, LineResult, BatchReport
from .text_utils import repair_markup, clean_translated_text
from .config import TranslatorConfig

__all__ = [
    # Models
    "Caption",
    "SubtitleDocument",
    "TranslatorConfig",
    # Parsing
    "parse_srt",
    "serialize_srt",
    "load_srt",
    "save_srt",
    "validate_srt_file",
    "SrtParseError",
    # Merging
    "merge_lines",
    "split_lines",
    "should_merge",
    # Resume
    "plan_resume",
    "load_checkpoint",
    "ResumePlan",
    "CheckpointMismatchError",
    # Progress
    "ProgressEstimator",
    "Estimate",
    # Translation
    "TranslationProvider",
    "GoogleTranslateProvider",
    "choose_candidate",
    "create_provider",
    "SubtitleTranslator",
    "translate_line",
    "output_path_for",
    "LineResult",
    "BatchReport",
    # Utils
    "repair_markup",
    "clean_translated_text",
]
