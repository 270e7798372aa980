#!/usr/bin/env python
import logging
from importlib import resources
from pathlib import Path
from typing import cast

import jsonargparse
import yaml
from lagom import Container

from .colors import hex_to_color
from .dispatch import Dispatcher, LoadMandala
from .flood_fill import FloodFillEngine
from .mandala_io import save_image
from .painter_config import PainterConfig
from .session import Session

logger = logging.getLogger()


def load_palette(path: Path | None) -> list[str]:
    data = resources.files("mandala.data")
    palette_path = path or data / "palette.yaml"
    with palette_path.open() as f:
        palette = cast("list[str]", yaml.safe_load(f)["palette"])
    for color in palette:
        _ = hex_to_color(color)
    return palette


def build_container(args: PainterConfig) -> Container:
    _ = hex_to_color(args.color)
    session = Session.blank(
        args.canvas_width,
        args.canvas_height,
        color=args.color,
        brush_size=args.brush_size,
    )

    container = Container()
    container[PainterConfig] = args
    container[Session] = session
    container[FloodFillEngine] = FloodFillEngine(args.tolerance)
    container[Dispatcher] = lambda c: Dispatcher(c[Session], c[FloodFillEngine])
    return container


def run_script(container: Container) -> Path:
    """Apply a command file to the canvas and save the result."""
    args = container[PainterConfig]
    if args.script is None:
        raise ValueError("No script file given")
    dispatcher = container[Dispatcher]
    if args.mandala:
        dispatcher.dispatch(LoadMandala(args.mandala))
    count = dispatcher.run_script(args.script.read_text().splitlines())
    logger.info(f"Ran {count} commands from {args.script}")
    return save_image(container[Session].buffer, args.output)


def run_window(container: Container):
    import pixpy as pix

    from .painter import Painter

    args = container[PainterConfig]
    screen = pix.open_display(
        size=(args.window_width, args.window_height), full_screen=args.full_screen
    )
    container[pix.Screen] = screen

    painter = container[Painter]
    if args.mandala:
        painter.send(LoadMandala(args.mandala))

    while pix.run_loop():
        painter.update()
        painter.update_events(pix.all_events())
        screen.swap()


def main():
    jsonargparse.set_parsing_settings(docstring_parse_attribute_docstrings=True)

    args = cast(
        "PainterConfig",
        jsonargparse.auto_cli(PainterConfig, parser_mode="toml"),  # pyright: ignore[reportUnknownMemberType]
    )
    args.palette = load_palette(args.palette_file)

    logger.info("Starting painter")
    container = build_container(args)

    if args.script:
        out = run_script(container)
        print(f"Saved {out}")
    else:
        run_window(container)


if __name__ == "__main__":
    main()
