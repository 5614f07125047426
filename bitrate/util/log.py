import logging
from pathlib import Path


class LevelPadFormatter(logging.Formatter):
    LEVEL_WIDTH = len("WARNING")

    def format(self, record):
        level = record.levelname
        pad = " " * (self.LEVEL_WIDTH - len(level))
        record.padded = f"[{level}]{pad}"
        record.unpadded = f"[{level}]"
        return super().format(record)


def configure(debug: bool, name: str, logfile: Path) -> logging.Logger:
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Keep bar output on stdout clean, logs only go to the file
    logger.propagate = False

    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return logger

    handler = logging.FileHandler(logfile, mode="a", encoding="utf-8")
    handler.setLevel(level)
    formatter = LevelPadFormatter(
        "%(asctime)s %(unpadded)s %(name)s.%(funcName)s - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
