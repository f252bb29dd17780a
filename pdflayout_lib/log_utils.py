#!/usr/bin/env python3
"""
pdflayout_lib/log_utils.py: Logging helpers for the pdflayout tools.
This module contains:
- setup_logging: Configures handlers and per-topic debug levels.
- RichLogFormatter: A custom logging formatter for colorful console output.
- ContextFilter: A logging filter to add contextual data (like the file
  being imported) to log records.
"""

import logging

PROJECT_TOPICS = {
    "pdflayout": {
        "api",
        "classify",
        "extract",
        "images",
        "layout",
        "outline",
        "prescan",
        "render",
        "structure",
    },
}


def setup_logging(
    project_name: str,
    level=logging.INFO,
    color_logs=False,
    debug_topics=None,
    log_file: str = None,
):
    """Configures logging for the application."""
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        for h in root_logger.handlers[:]:
            root_logger.removeHandler(h)
            h.close()

    # Console Handler (always enabled)
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(RichLogFormatter(use_color=color_logs))
    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)

    # File Handler (optional)
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            # File logs should not be colored
            file_handler.setFormatter(RichLogFormatter(use_color=False))
            root_logger.addHandler(file_handler)
            logging.getLogger(project_name).info("Logging to file: %s", log_file)
        except IOError as e:
            logging.getLogger(project_name).error(
                "Could not open log file %s: %s", log_file, e
            )

    # Silence noisy libraries
    logging.getLogger("pdfminer").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    if debug_topics:
        enable_debug_topics(project_name, debug_topics)


def enable_debug_topics(project_name, debug_topics):
    """Sets DEBUG on every topic logger matching a comma-separated prefix list.

    Returns the set of topics that were enabled.
    """
    valid_topics = PROJECT_TOPICS.get(project_name, set())
    user_topics = [t.strip() for t in debug_topics.split(",") if t.strip()]
    if "all" in user_topics:
        topics_to_set = set(valid_topics)
    else:
        topics_to_set = {
            full for u in user_topics for full in valid_topics if full.startswith(u)
        }
    for topic in topics_to_set:
        logging.getLogger(f"{project_name}.{topic}").setLevel(logging.DEBUG)
    return topics_to_set


class ContextFilter(logging.Filter):
    """
    A logging filter that injects contextual information into log records.
    """

    def __init__(self, context_str=""):
        super().__init__()
        self.context_str = context_str

    def filter(self, record):
        record.context = self.context_str
        return True


# --- CUSTOM LOGGING FORMATTER ---
class RichLogFormatter(logging.Formatter):
    """A custom logging formatter for colorful and aligned console output.
    Each record is prefixed with its (optionally colored) level and the
    topic part of the logger name, so `pdflayout.outline` prints as `outlin`.
    Args:
        use_color (bool): If True, ANSI color codes are used. Defaults to False.
    """

    def __init__(self, use_color=False):
        super().__init__()
        if use_color:
            self.COLORS = {
                logging.DEBUG: "\033[38;5;252m",  # Light Grey
                logging.INFO: "\033[38;5;111m",  # Pastel Blue
                logging.WARNING: "\033[38;5;229m",  # Pale Yellow
                logging.ERROR: "\033[38;5;210m",  # Soft Red
                logging.CRITICAL: "\033[38;5;217m",  # Light Magenta
            }
            self.BOLD = "\033[1m"
            self.RESET = "\033[0m"
        else:
            self.COLORS = {}
            self.BOLD = ""
            self.RESET = ""

    def format(self, record):
        color = self.COLORS.get(record.levelno, "")
        level_name = record.levelname[:5]

        # Use the part of the logger name after the project name as the topic
        name_parts = record.name.split(".")
        topic = name_parts[1][:6] if len(name_parts) > 1 else record.name[:6]

        has_ctx = getattr(record, "context", "")
        context_str = f"[{record.context}]" if has_ctx else ""

        prefix = (
            f"{color}{level_name:<5}{self.RESET}:"
            f"{self.BOLD}{topic:<6}{self.RESET}{context_str}: "
        )
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "\n".join(f"{prefix}{line}" for line in message.split("\n"))
