import logging
from pathlib import Path
from typing import Optional

import click
from textual.logging import TextualHandler

from reqtui.app import ReqtuiApp
from reqtui.config import CONFIG_PATH, ensure_config, load_settings


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_PATH,
    show_default=True,
    help="YAML configuration file.",
)
@click.option(
    "--requests-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding saved requests.",
)
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
)
@click.option("--debug", is_flag=True, help="Also log to the textual dev console.")
def main(
    config_path: Path,
    requests_dir: Optional[Path],
    timeout: Optional[float],
    log_file: Optional[Path],
    debug: bool,
) -> None:
    """Run the reqtui TUI application."""
    ensure_config(config_path)
    settings = load_settings(config_path)
    if requests_dir is not None:
        settings.requests_dir = requests_dir
    if timeout is not None:
        settings.timeout = timeout
    if log_file is not None:
        settings.log_file = log_file

    _configure_logging(settings.log_file, "DEBUG" if debug else settings.log_level, debug)
    app = ReqtuiApp(settings)
    app.run()


def _configure_logging(log_file: Optional[Path], level: str, debug: bool) -> None:
    handlers = []
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    if debug:
        handlers.append(TextualHandler())
    if not handlers:
        handlers.append(logging.NullHandler())
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )


if __name__ == "__main__":
    main()
