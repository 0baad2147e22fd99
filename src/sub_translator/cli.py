"""Command-line interface for Sub Translator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import TranslatorConfig
from .browser_client import create_provider
from .parser import validate_srt_file
from .translator import SubtitleTranslator


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sub-translator",
        description="Translate subtitle files through a browser-driven translation service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s movie.srt                     # Translate one file
  %(prog)s subtitles/                    # Translate every .srt in a directory
  %(prog)s movie.srt --headless          # Run the browser without a window

Languages are read from SUBTRANSLATOR_SOURCE_LANG / SUBTRANSLATOR_TARGET_LANG.
Re-running the same command resumes an interrupted translation.
        """
    )

    # Positional arguments
    parser.add_argument("input_path", help="Subtitle file or directory of subtitle files")

    # Browser
    parser.add_argument("--headless", dest="headless", action="store_true", default=None,
                        help="Run the browser headless")
    parser.add_argument("--no-headless", dest="headless", action="store_false",
                        help="Show the browser window")

    # Batch behaviour
    parser.add_argument("--abort-on-error", action="store_true",
                        help="Stop the whole batch when one file fails")
    parser.add_argument("--verify-resume", action="store_true",
                        help="Check checkpoint timecodes against the source before resuming")

    # Misc
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def run(args: argparse.Namespace) -> int:
    """Main workflow."""
    logger = logging.getLogger(__name__)
    config = TranslatorConfig.from_args(args)

    # 验证配置
    error = config.validate()
    if error:
        logger.error(error)
        return 1

    # 验证输入路径
    in_path = Path(args.input_path).expanduser().resolve()
    if not in_path.is_dir():
        error = validate_srt_file(in_path)
        if error:
            logger.error(error)
            build_parser().print_usage()
            return 1

    with create_provider(config) as provider:
        logger.info(
            f"Translating {config.source_lang} -> {config.target_lang} "
            f"with {provider.get_provider_name()}"
        )
        translator = SubtitleTranslator(provider, config)
        report = translator.translate_path(in_path)

    logger.info(
        f"Finished: {len(report.translated)} translated, "
        f"{len(report.failed)} failed, {len(report.skipped)} skipped"
    )
    return 0 if report.ok else 1


def main(argv=None) -> None:
    """CLI entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        exit_code = run(args)
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted by user. Progress saved.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
