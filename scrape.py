#!/usr/bin/env python3
"""
Course Lesson Scraper

Main entry point script for collecting the media ids of a course's lessons.
Uses the LessonScraper class to drive the browser and write jsons/<course>.json.
"""
import argparse
import sys
import time
import os
import json
from getpass import getpass

from lesson_scraper import LessonScraper, ScrapeConfig
from manifest import fetch_manifest, load_manifest, save_manifest
from records import DEFAULT_OUTPUT_DIR

# Import the logger module
import logger

DEFAULT_MANIFEST = "response.json"
DEFAULT_CONFIG = "config.json"


def load_config(config_path=None):
    """Load settings (currently the session cookie) from a JSON file in the working directory."""
    config_path = config_path or DEFAULT_CONFIG

    config = {}

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
        except (OSError, ValueError) as e:
            logger.warning(f"Error loading config: {str(e)}")

    return config


def resolve_cookie(args):
    """Pick the session cookie from the command line, config file or a prompt."""
    if args.cookie:
        return args.cookie

    cookie = load_config(args.config).get('cookie')
    if not cookie and sys.stdin.isatty():
        cookie = getpass("Enter your remember_user_token cookie: ").strip()
    return cookie


def build_parser():
    parser = argparse.ArgumentParser(description='Collect media ids for every lesson of a course')
    parser.add_argument('--cookie', help='Value of the remember_user_token cookie')
    parser.add_argument('--config', help='Path to a JSON config file with a "cookie" key (default: ./config.json)')
    parser.add_argument('--manifest', default=DEFAULT_MANIFEST,
                        help='Path to the course manifest JSON (default: response.json)')
    parser.add_argument('--fetch-manifest', metavar='COURSE_SLUG',
                        help='Download the manifest for this course slug and save it to --manifest first')
    parser.add_argument('--output-dir', default=DEFAULT_OUTPUT_DIR,
                        help='Directory for the output JSON (default: jsons)')
    parser.add_argument('--browser', choices=['chrome', 'firefox'], default='chrome',
                        help='Browser to drive')
    parser.add_argument('--show-browser', action='store_true',
                        help='Show the browser window instead of running headless')
    parser.add_argument('--settle-delay', type=float, default=5,
                        help='Seconds to wait after each page load (default: 5)')
    parser.add_argument('--script-timeout', type=float, default=30,
                        help='Seconds to wait for the page scripts (default: 30)')
    parser.add_argument('--media-timeout', type=float, default=15,
                        help='Seconds to wait for the player script inside the frame (default: 15)')
    parser.add_argument('--lesson-delay', type=float, default=0,
                        help='Seconds to pause between lessons (default: 0)')
    parser.add_argument('--include-text', action='store_true',
                        help='Save text lessons as HTML files')
    parser.add_argument('--text-dir', help='Directory for saved text lessons (default: course name)')
    parser.add_argument('--no-complete', action='store_true',
                        help='Do not click "complete and continue" on each lesson')
    parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error'],
                        default='info', help='Logging level (for file logging)')
    parser.add_argument('--no-log-file', action='store_true',
                        help='Disable logging to file')
    parser.add_argument('--verbose', action='store_true',
                        help='Use the same log level for console as for the log file')
    return parser


def main():
    """Main entry point for the script."""
    args = build_parser().parse_args()

    log_levels = {
        'debug': logger.DEBUG,
        'info': logger.INFO,
        'warning': logger.WARNING,
        'error': logger.ERROR
    }
    # The console stays at INFO unless verbose mode is enabled
    console_level = log_levels[args.log_level] if args.verbose else log_levels['info']

    logger.setup_logger(level=log_levels[args.log_level], console_level=console_level)

    logger.info("Starting lesson scraper")

    cookie = resolve_cookie(args)
    if not cookie:
        logger.error("A session cookie is required. Use --cookie or a config file.")
        return 1

    if args.fetch_manifest:
        save_manifest(fetch_manifest(args.fetch_manifest, cookie), args.manifest)

    manifest = load_manifest(args.manifest)

    if not args.no_log_file:
        log_path = logger.add_run_log(manifest.course_name)
        logger.info(f"Writing run log to {log_path}")

    config = ScrapeConfig(
        session_cookie=cookie,
        settle_delay=args.settle_delay,
        script_timeout=args.script_timeout,
        media_timeout=args.media_timeout,
        lesson_delay=args.lesson_delay,
        output_dir=args.output_dir,
        include_text=args.include_text,
        text_dir=args.text_dir,
        complete_lessons=not args.no_complete
    )

    scraper = LessonScraper(config, headless=not args.show_browser, browser_type=args.browser)
    start_time = time.time()

    try:
        document = scraper.run(manifest)

        elapsed_time = time.time() - start_time
        logger.info(f"Scraped {document.item_count} items in {elapsed_time:.2f} seconds")
        return 0

    except KeyboardInterrupt:
        logger.warning("Scraping interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
        return 1
    finally:
        logger.info("Closing browser and cleaning up")
        scraper.close()


if __name__ == "__main__":
    sys.exit(main())
