"""Entry point: delegates to the CLI app."""

from rich.traceback import install

from fieldsales.cli import app
from fieldsales.utils.logger import clear_context


def run() -> None:
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        app()
    finally:
        clear_context()


if __name__ == "__main__":
    run()
