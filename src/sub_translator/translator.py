"""Core translation loop: one file, one caption, one line at a time."""

from __future__ import annotations

import time
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from tqdm import tqdm

from .browser_client import TranslationProvider
from .config import TranslatorConfig, SUPPORTED_EXTENSIONS, ERROR_SENTINEL
from .merger import merge_lines, split_lines
from .models import Caption
from .parser import SrtParseError, load_srt, save_srt, validate_srt_file
from .progress import ProgressEstimator
from .resume import CheckpointMismatchError, load_checkpoint, plan_resume
from .text_utils import clean_translated_text

logger = logging.getLogger(__name__)


@dataclass
class LineResult:
    """单行翻译结果。"""
    text: str
    attempts: int
    success: bool


@dataclass
class BatchReport:
    """Outcome of translating a file or directory."""
    translated: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def output_path_for(path: Path, target_lang: str) -> Path:
    """Return ``<stem>-<lang><suffix>`` next to the source file."""
    return path.with_name(f"{path.stem}-{target_lang}{path.suffix}")


def translate_line(
    provider: TranslationProvider,
    text: str,
    source_lang: str,
    target_lang: str,
    max_attempts: int = 5,
    retry_delay: float = 0.0,
    sleep: Callable[[float], None] = time.sleep,
) -> LineResult:
    """
    Translate one unit of text with a bounded number of attempts.

    Any exception raised by the provider uses up one attempt. When every
    attempt fails the result text is the ``ERROR`` sentinel.

    Returns:
        LineResult with the translation or the sentinel
    """
    if not text.strip():
        return LineResult(text, 0, True)

    for attempt in range(1, max_attempts + 1):
        try:
            translated = provider.translate(text, source_lang, target_lang)
            return LineResult(clean_translated_text(translated), attempt, True)
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{max_attempts} failed for {text[:40]!r}: {e}")
            if attempt < max_attempts and retry_delay > 0:
                sleep(retry_delay)

    logger.error(f"All {max_attempts} attempts failed for {text[:40]!r}, recording {ERROR_SENTINEL}")
    return LineResult(ERROR_SENTINEL, max_attempts, False)


class SubtitleTranslator:
    """
    Translates subtitle files through a provider, checkpointing as it goes.

    The provider is owned by the caller; this class neither opens nor
    closes it.
    """

    def __init__(
        self,
        provider: TranslationProvider,
        config: Optional[TranslatorConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        show_progress: bool = True,
    ):
        self.provider = provider
        self.config = config or TranslatorConfig()
        self._sleep = sleep
        self._clock = clock
        self.show_progress = show_progress

    def translate_caption(self, caption: Caption) -> Caption:
        """Translate every unit of a caption and restore its line breaks."""
        cfg = self.config
        lines: List[str] = []

        for unit in merge_lines(caption):
            result = translate_line(
                self.provider, unit, cfg.source_lang, cfg.target_lang,
                max_attempts=cfg.max_attempts,
                retry_delay=cfg.retry_delay,
                sleep=self._sleep,
            )
            lines.extend(split_lines(result.text) if result.success else [result.text])

        return caption.copy(lines=lines)

    def translate_file(self, path: Path) -> Path:
        """
        Translate one subtitle file, resuming from its output if present.

        Returns:
            Path of the translated file

        Raises:
            SrtParseError: If the source is not a usable subtitle file, or the
                source or checkpoint is malformed
            CheckpointMismatchError: If the checkpoint cannot belong to the source
            OSError: If the checkpoint cannot be written
        """
        cfg = self.config
        out_path = output_path_for(path, cfg.target_lang)

        error = validate_srt_file(path)
        if error:
            raise SrtParseError(error)

        logger.info(f"Reading: {path}")
        source = load_srt(path)
        if not len(source):
            raise SrtParseError(f"No subtitle entries found in {path}")

        plan = plan_resume(source, load_checkpoint(out_path), verify=cfg.verify_resume)
        if plan.is_complete:
            logger.info(f"Already translated ({plan.total} captions): {out_path}")
            return out_path
        if plan.cursor:
            logger.info(f"Resuming at caption {plan.cursor + 1}/{plan.total}")

        # 已完成部分与源文档分开保存
        done: List[Caption] = plan.captions[:plan.cursor]
        pending = plan.captions[plan.cursor:]
        estimator = ProgressEstimator(len(pending), cfg.eta_min_samples, self._clock)

        with tqdm(
            total=plan.total,
            initial=plan.cursor,
            desc=path.name,
            unit="caption",
            disable=not self.show_progress,
        ) as bar:
            for n, caption in enumerate(pending, 1):
                done.append(self.translate_caption(caption))
                save_srt(done, out_path)

                estimate = estimator.record()
                bar.update(1)
                bar.set_postfix_str(f"ETA {estimate}")
                logger.debug(f"Translated caption {len(done)}/{plan.total}. Estimated time to complete: {estimate}")

                if n % cfg.throttle_every == 0 and n < len(pending) and cfg.throttle_seconds > 0:
                    logger.info(f"Pausing {cfg.throttle_seconds:g}s to avoid being blocked...")
                    self._sleep(cfg.throttle_seconds)

        logger.info(f"Done! {plan.total} captions saved to {out_path}")
        return out_path

    def translate_path(self, path: Path) -> BatchReport:
        """
        Translate a single file or every subtitle file in a directory.

        Files are processed one at a time. A file that fails is recorded and
        the batch continues, unless ``abort_on_error`` is set.
        """
        report = BatchReport()

        if path.is_dir():
            suffix = f"-{self.config.target_lang}"
            files = []
            for f in sorted(path.iterdir()):
                if not f.is_file() or f.suffix.lower() not in SUPPORTED_EXTENSIONS:
                    continue
                if f.stem.endswith(suffix):
                    # 跳过已生成的译文
                    report.skipped.append(f)
                    continue
                files.append(f)
            logger.info(f"Found {len(files)} subtitle files in {path}")
        else:
            files = [path]

        for f in files:
            try:
                report.translated.append(self.translate_file(f))
            except (SrtParseError, CheckpointMismatchError, OSError) as e:
                if self.config.abort_on_error:
                    raise
                logger.error(f"Failed to translate {f}: {e}")
                report.failed.append(f)

        return report
