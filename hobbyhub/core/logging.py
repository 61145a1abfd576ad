"""Structured logging setup."""
import logging, sys, json

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def format(self, record):  # pragma: no cover
        base = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        for k, v in record.__dict__.items():
            if k in _RESERVED or k.startswith("_"):
                continue
            base[k] = v
        return json.dumps(base, default=str)


def configure_logging(level: str = "INFO", fmt: str | None = None, json_output: bool = False) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(h, "_hobbyhub", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler._hobbyhub = True
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)
