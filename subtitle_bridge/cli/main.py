"""Command-line interface for the subtitle bridge."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, List

from ..core import SubtitleBridgeError, Translator, TranslationConfig, TranslationResult, TranslationStyle
from ..formats import output_format_for_path
from ..translators import TranslatorFactory
from ..utils.config import ConfigManager
from ..utils.language import language_slug
from ..utils.report import write_report

logger = logging.getLogger(__name__)


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: List of command line arguments. If None, uses sys.argv[1:].

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='subtitle-bridge',
        description='Convert subtitle files between formats and translate them with an LLM.'
    )

    # Input/output options
    io_group = parser.add_argument_group('Input/Output')
    io_group.add_argument(
        'input',
        type=str,
        help='Input subtitle file (.srt, .vtt, .ass, .ssa, .txt, .md)'
    )
    io_group.add_argument(
        '-o', '--output',
        type=str,
        help='Output file; its extension selects the format '
             '(default: input name with a target language suffix)'
    )
    io_group.add_argument(
        '--report',
        type=str,
        default=None,
        help='Write a text report with statistics and sample translations'
    )

    # Language options
    lang_group = parser.add_argument_group('Language')
    lang_group.add_argument(
        '-s', '--source-lang',
        type=str,
        default=None,
        help="Source language name (e.g., English), or 'auto' to detect it"
    )
    lang_group.add_argument(
        '-t', '--target-lang',
        type=str,
        default=None,
        help='Target language name (e.g., Traditional Chinese)'
    )
    lang_group.add_argument(
        '--style',
        type=str,
        choices=[style.value for style in TranslationStyle],
        default=None,
        help='Translation style'
    )

    # Backend options
    backend_group = parser.add_argument_group('Backend')
    backend_group.add_argument(
        '--translator',
        type=str,
        choices=sorted(TranslatorFactory.get_available_translators()),
        default=None,
        help='Translation backend to use'
    )
    backend_group.add_argument(
        '-m', '--model',
        type=str,
        default=None,
        help='Model identifier sent to the backend'
    )
    backend_group.add_argument(
        '--endpoint',
        type=str,
        default=None,
        help='Chat completions endpoint URL (defaults to the backend preset)'
    )
    backend_group.add_argument(
        '--api-key',
        type=str,
        default=None,
        help='API key (default: read from the backend environment variable)'
    )
    backend_group.add_argument(
        '--timeout',
        type=int,
        default=None,
        help='Request timeout in seconds'
    )

    # Translation options
    trans_group = parser.add_argument_group('Translation')
    trans_group.add_argument(
        '--batch-size',
        type=int,
        default=None,
        help='Number of subtitles translated in a single request'
    )
    trans_group.add_argument(
        '--concurrency',
        type=int,
        default=None,
        help='Maximum number of batches translated at the same time'
    )
    trans_group.add_argument(
        '--retries',
        type=int,
        default=None,
        help='Retries per batch after the first failed attempt'
    )
    trans_group.add_argument(
        '--retry-delay',
        type=float,
        default=None,
        help='Base backoff in seconds; attempt N waits N times this value'
    )
    trans_group.add_argument(
        '--request-delay',
        type=float,
        default=None,
        help='Pause in seconds before every batch after the first'
    )
    trans_group.add_argument(
        '--autofix',
        action='store_true',
        help='Renumber subtitles and report timing overlaps before translating'
    )
    trans_group.add_argument(
        '--dry-run',
        action='store_true',
        help='Parse and plan batches without calling the backend or writing output'
    )

    # Output options
    out_group = parser.add_argument_group('Output')
    out_group.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (can be used multiple times)'
    )
    out_group.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress non-error output'
    )

    # Config options
    config_group = parser.add_argument_group('Configuration')
    config_group.add_argument(
        '--config',
        type=str,
        help='Path to configuration file'
    )
    config_group.add_argument(
        '--save-config',
        action='store_true',
        help='Save current options to config file'
    )

    return parser.parse_args(args)


def setup_logging(verbosity: int = 0, quiet: bool = False) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: Verbosity level (0=INFO, 1+=DEBUG)
        quiet: If True, suppress all non-error output
    """
    if quiet:
        log_level = logging.ERROR
    else:
        log_level = max(
            logging.INFO - (verbosity * 10),
            logging.DEBUG
        )

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def default_output_path(input_path: Path, target_language: str) -> Path:
    """Input name with a target language suffix, e.g. ``movie_traditional-chinese.srt``."""
    return input_path.with_name(f"{input_path.stem}_{language_slug(target_language)}{input_path.suffix}")


def resolve_api_key(translator_type: str, api_key: Optional[str]) -> Optional[str]:
    """Return the explicit key or the one from the backend's environment variable."""
    if api_key:
        return api_key
    env_name = TranslatorFactory.api_key_env(translator_type)
    return os.environ.get(env_name) if env_name else None


def build_translation_config(config: ConfigManager, args: argparse.Namespace) -> TranslationConfig:
    """Merge command-line options over stored configuration."""
    return config.translation_config(
        model=args.model,
        source_language=args.source_lang,
        target_language=args.target_lang,
        style=args.style,
        batch_size=args.batch_size,
        concurrency=args.concurrency,
        max_retries=args.retries,
        retry_delay=args.retry_delay,
        request_delay=args.request_delay,
        autofix=args.autofix or None,
        dry_run=args.dry_run or None,
    )


async def process_file(
    input_file: Path,
    output_file: Path,
    translation_config: TranslationConfig,
    translator_type: str,
    backend_config: dict,
) -> TranslationResult:
    """Translate a single subtitle file.

    Args:
        input_file: Input file path
        output_file: Output file path
        translation_config: Run configuration
        translator_type: Backend factory key
        backend_config: Backend settings (endpoint, api_key, timeout)

    Returns:
        The translation result
    """
    async with Translator(
        translation_config,
        translator_type=translator_type,
        backend_config=backend_config,
    ) as translator:
        logger.info(f"Translating: {input_file} -> {output_file}")
        logger.info(f"Language: {translation_config.source_language} -> {translation_config.target_language}")
        logger.info(f"Model: {translation_config.model}")
        return await translator.translate_file(input_file, output_file)


def log_summary(result: TranslationResult) -> None:
    stats = result.stats
    if result.dry_run:
        logger.info(f"Dry run complete: {stats.entries} subtitles in {stats.total_batches} batches")
        return
    logger.info(f"Translated {stats.entries} subtitles "
                f"({stats.succeeded_batches}/{stats.total_batches} batches succeeded)")
    logger.info(f"Characters: {stats.original_chars} -> {stats.translated_chars} "
                f"(ratio {stats.expansion_ratio:.2f})")
    if stats.failed_batches:
        logger.warning(f"{stats.failed_batches} batches kept their original text")


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments. If None, uses sys.argv[1:].

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    args = parse_args(args)
    setup_logging(verbosity=args.verbose, quiet=args.quiet)

    config = ConfigManager(args.config)

    input_file = Path(args.input).expanduser()
    if not input_file.is_file():
        logger.error(f"Input file not found: {input_file}")
        return 1

    try:
        translation_config = build_translation_config(config, args)
    except SubtitleBridgeError as e:
        logger.error(str(e))
        return 1

    if args.output:
        output_file = Path(args.output).expanduser()
    else:
        output_file = default_output_path(input_file, translation_config.target_language)

    try:
        output_format_for_path(output_file)
    except SubtitleBridgeError as e:
        logger.error(str(e))
        return 1

    translator_type = args.translator or config.get('translator.type')
    api_key = resolve_api_key(translator_type, args.api_key)
    if not api_key and not translation_config.dry_run:
        env_name = TranslatorFactory.api_key_env(translator_type)
        hint = f" or set the {env_name} environment variable" if env_name else ""
        logger.error(f"No API key found. Pass --api-key{hint}.")
        return 1

    backend_config = {
        'endpoint': args.endpoint or config.get('translator.endpoint'),
        'api_key': api_key,
        'timeout': args.timeout or config.get('translator.timeout'),
    }

    try:
        result = asyncio.run(process_file(
            input_file, output_file, translation_config, translator_type, backend_config
        ))
    except KeyboardInterrupt:
        logger.error("Interrupted, no output written")
        return 130
    except SubtitleBridgeError as e:
        logger.error(str(e))
        return 1

    log_summary(result)

    if args.report:
        try:
            write_report(result, args.report)
        except OSError as e:
            logger.error(f"Failed to write report: {e}")

    if args.save_config:
        updates = {}

        if args.translator:
            updates['translator.type'] = args.translator
        if args.endpoint:
            updates['translator.endpoint'] = args.endpoint
        if args.model:
            updates['translator.model'] = args.model
        if args.timeout:
            updates['translator.timeout'] = args.timeout
        if args.source_lang:
            updates['languages.source'] = args.source_lang
        if args.target_lang:
            updates['languages.target'] = args.target_lang
        if args.style:
            updates['translation.style'] = args.style
        if args.batch_size:
            updates['translation.batch_size'] = args.batch_size
        if args.concurrency:
            updates['translation.concurrency'] = args.concurrency
        if args.retries is not None:
            updates['translation.max_retries'] = args.retries
        if args.retry_delay is not None:
            updates['translation.retry_delay'] = args.retry_delay
        if args.request_delay is not None:
            updates['translation.request_delay'] = args.request_delay

        if updates and config.update(updates):
            logger.info(f"Configuration saved to {config.config_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
