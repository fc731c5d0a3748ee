import argparse
import logging
import sys
from typing import TextIO

from schedbot.commands import CommandInterpreter, Message
from schedbot.config import load_settings
from schedbot.schedule import Schedule


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def run(interpreter: CommandInterpreter, stream: TextIO, out: TextIO) -> None:
    while True:
        try:
            line = stream.readline()
        except OSError:
            logging.getLogger(__name__).warning("Failed to read command", exc_info=True)
            print(Message.IO_ERROR.value, file=out)
            return

        # End of input behaves like EXIT.
        if not line:
            return

        result = interpreter.execute(line)
        if result.message:
            print(result.message, file=out)
        if not result.keep_going:
            return


def main() -> int:
    parser = argparse.ArgumentParser(description="SchedBot: appointment scheduler console")
    parser.add_argument("--script", metavar="FILE", help="Read commands from FILE instead of stdin")
    args = parser.parse_args()

    settings = load_settings()
    _setup_logging(settings.log_level)

    interpreter = CommandInterpreter(Schedule(), settings)

    if args.script:
        with open(args.script, "r", encoding="utf-8") as f:
            run(interpreter, f, sys.stdout)
    else:
        run(interpreter, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
