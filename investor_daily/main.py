#!/usr/bin/env python3
"""
Main entry point for the AI Investor Daily run.

Orchestrates the daily run: fetch → curate → pick → render, then writes
the HTML email to the output directory.
"""

import logging
import sys
from datetime import date, datetime
from pathlib import Path

from .config import ConfigError, load_config
from .email_renderer import build_email_html
from .pipeline import run_pipeline


logger = logging.getLogger(__name__)


def _setup_logging() -> Path:
    """
    Configure logging to both console and file.

    Creates a timestamped log file in the logs/ directory.

    Returns:
        Path to the log file.
    """
    logs_dir = Path("logs")
    logs_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(file_handler)

    return log_file


def write_email(html: str, output_dir: Path, issue_date: date) -> Path:
    """Write the rendered email as daily-email-YYYY-MM-DD.html."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_file = output_dir / f"daily-email-{issue_date.isoformat()}.html"
    out_file.write_text(html, encoding="utf-8")
    return out_file


def run_daily() -> Path:
    """
    Execute the daily pipeline and write the email.

    Steps:
    1. Load configuration
    2. Run the curation pipeline
    3. Render the email HTML
    4. Write it to the output directory

    Returns:
        Path of the written HTML file.
    """
    logger.info("Starting AI Investor Daily run")

    try:
        config = load_config()
        logger.info("Configuration loaded successfully")
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    issue_date = date.today()
    payload = run_pipeline(config, issue_date=issue_date)
    logger.info(
        f"Payload ready: {len(payload.picks)} picks, {len(payload.articles)} articles"
    )

    html = build_email_html(payload)
    out_file = write_email(html, Path(config.output_dir), issue_date)
    logger.info(f"Wrote {out_file}")
    return out_file


def main() -> None:
    """CLI entry point."""
    log_file = _setup_logging()
    logger.info(f"Log file: {log_file.absolute()}")

    try:
        run_daily()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
