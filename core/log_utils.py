#!/usr/bin/env python3
"""
core/log_utils.py: Logging for the ttparse command line.

Every stage logs to its own topic logger (`ttparse.header`, `ttstore.storage`,
...). `setup_logging` installs the console handler, an optional log file, and
turns on DEBUG for the topics selected with `--debug`.
"""

import logging

# --debug topic -> logger name
TOPIC_LOGGERS = {
    "layout": "ttparse.layout",
    "header": "ttparse.header",
    "columns": "ttparse.columns",
    "rows": "ttparse.rows",
    "assemble": "ttparse.assemble",
    "api": "ttparse.api",
    "scan": "ttparse.scan",
    "storage": "ttstore.storage",
    "config": "ttstore.config",
}


def debug_loggers(debug_topics: str) -> list[str]:
    """
    Logger names selected by a comma-separated topic list. Topics match by
    prefix ("head" selects header); "all" selects every topic.
    """
    wanted = [t.strip() for t in (debug_topics or "").split(",") if t.strip()]
    if "all" in wanted:
        return sorted(TOPIC_LOGGERS.values())
    return sorted(
        {name for topic, name in TOPIC_LOGGERS.items() if any(topic.startswith(w) for w in wanted)}
    )


def setup_logging(
    level=logging.WARNING,
    color_logs=False,
    debug_topics=None,
    log_file: str = None,
    context: str = None,
):
    """Configures the root logger for one run; `context` tags every record."""
    root_logger = logging.getLogger()
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
        h.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(RichLogFormatter(use_color=color_logs))
    handlers = [console_handler]
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            file_handler.setFormatter(RichLogFormatter(use_color=False))
            handlers.append(file_handler)
        except OSError as e:
            logging.getLogger("ttparse").error("Could not open log file %s: %s", log_file, e)

    for handler in handlers:
        if context:
            handler.addFilter(ContextFilter(context))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # pdfminer is chatty at INFO
    logging.getLogger("pdfminer").setLevel(logging.WARNING)

    for name in debug_loggers(debug_topics):
        logging.getLogger(name).setLevel(logging.DEBUG)
    if log_file and len(handlers) > 1:
        logging.getLogger("ttparse").info("Logging to file: %s", log_file)


class ContextFilter(logging.Filter):
    """Stamps each record with the input file being processed."""

    def __init__(self, context_str=""):
        super().__init__()
        self.context_str = context_str

    def filter(self, record):
        record.context = self.context_str
        return True


class RichLogFormatter(logging.Formatter):
    """
    Prefixes every line of a record with its level and topic, e.g.
    `WARNI:assemble[cse.pdf]: Page 4 skipped`. Colors are ANSI codes and are
    only used on the console.
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[38;5;252m",
        logging.INFO: "\033[38;5;111m",
        logging.WARNING: "\033[38;5;229m",
        logging.ERROR: "\033[38;5;210m",
        logging.CRITICAL: "\033[38;5;217m",
    }

    def __init__(self, use_color=False):
        super().__init__()
        self.use_color = use_color
        self.BOLD = "\033[1m" if use_color else ""
        self.RESET = "\033[0m" if use_color else ""

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "") if self.use_color else ""
        topic = record.name.rsplit(".", 1)[-1][:8]
        context = getattr(record, "context", "")
        prefix = (
            f"{color}{record.levelname[:5]:<5}{self.RESET}:"
            f"{self.BOLD}{topic:<8}{self.RESET}{f'[{context}]' if context else ''}: "
        )
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "\n".join(prefix + line for line in message.split("\n"))
