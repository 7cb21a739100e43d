import logging
import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np

# Imports for visualization
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont

from multibrot import (
    FractalMode,
    FractalParameters,
    FrameSnapshot,
    ViewState,
    Viewport,
    load_palette,
    render_frame,
)
from multibrot.palette import DEFAULT_COLORMAP, Palette
from multibrot.renderer import BACKENDS
from multibrot.view import MAX_SIDE, MIN_SIDE

from argparse import ArgumentParser


def select_device(backend: str) -> str | None:
    """Pick the TensorFlow device, preferring the first visible GPU."""

    if backend != "tensorflow":
        return None

    import tensorflow as tf

    if _suppress_messages:
        tf.get_logger().setLevel("ERROR")

    log("TensorFlow version: %s" % tf.__version__)
    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


@dataclass
class RenderConfig:
    mode: FractalMode
    params: FractalParameters
    view: ViewState
    viewport: Viewport
    palette_path: Path | None
    colormap: str
    backend: str
    workers: int | None
    image_path: Path | None
    image_format: str
    interactive: bool
    show_coordinates: bool


def build_parser():
    parser = ArgumentParser(description="Render generalized Mandelbrot and Julia sets.")

    parser.add_argument('--mode', type=str, choices=[m.value for m in FractalMode],
                        dest='mode', help='fractal to render',
                        metavar='MODE', default=FractalMode.MANDELBROT.value)

    parser.add_argument('--power', type=float,
                        dest='power', help='real exponent of the recurrence z -> z**power + c',
                        metavar='POWER', default=2.0)

    parser.add_argument('--julia-re', type=float,
                        dest='julia_re', help='real part of the Julia seed constant',
                        metavar='JULIA_RE', default=0.0)

    parser.add_argument('--julia-im', type=float,
                        dest='julia_im', help='imaginary part of the Julia seed constant',
                        metavar='JULIA_IM', default=-0.67)

    parser.add_argument('--center-x', type=float,
                        dest='center_x', help='real coordinate of the view center',
                        metavar='CENTER_X', default=0.0)

    parser.add_argument('--center-y', type=float,
                        dest='center_y', help='imaginary coordinate of the view center',
                        metavar='CENTER_Y', default=0.0)

    parser.add_argument('--side', type=float,
                        dest='side', help='half-extent of the view along the shorter screen axis',
                        metavar='SIDE', default=2.0)

    parser.add_argument('--width', type=int,
                        dest='width', help='output width in pixels',
                        metavar='WIDTH', default=640)

    parser.add_argument('--height', type=int,
                        dest='height', help='output height in pixels',
                        metavar='HEIGHT', default=480)

    parser.add_argument('--palette', type=str,
                        dest='palette', help='image whose first row is used as the color gradient',
                        metavar='PALETTE')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap used when no palette image is given',
                        metavar='COLORMAP', default=DEFAULT_COLORMAP)

    parser.add_argument('--backend', type=str, choices=BACKENDS,
                        dest='backend', help='evaluation backend: numpy tiles on a thread pool, or a TensorFlow kernel',
                        metavar='BACKEND', default='numpy')

    parser.add_argument('--workers', type=int,
                        dest='workers', help='thread pool size for the numpy backend (default: CPU count)',
                        metavar='WORKERS')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination image file. Default: fractal.<format>.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the output image. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--interactive', action='store_true',
                        help='open a window to pan (drag), zoom (wheel) and toggle the fractal (space).')

    parser.add_argument('--show-coordinates', help='overlay the view center, side and parameters on the image',
                        dest='show_coordinates', action='store_true')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_render_config(opt, parser: ArgumentParser) -> RenderConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if not (opt.side > 0):
        parser.error("--side must be positive.")
    if opt.side < MIN_SIDE or opt.side > MAX_SIDE:
        warnings.warn(f"--side {opt.side:g} lies outside the zoom range [{MIN_SIDE:g}, {MAX_SIDE:g}].", stacklevel=2)
    if opt.workers is not None and opt.workers <= 0:
        parser.error("--workers must be positive.")
    if opt.workers is not None and opt.backend != "numpy":
        parser.error("--workers only applies to the numpy backend.")

    mode = FractalMode.parse(opt.mode)

    params = FractalParameters(power=opt.power, julia_seed=complex(opt.julia_re, opt.julia_im))
    view = ViewState(center_x=opt.center_x, center_y=opt.center_y, side=opt.side, mode=mode)

    image_format = (opt.format or "png").lower().lstrip(".") or "png"
    image_path: Path | None = None
    if opt.interactive:
        if opt.output:
            parser.error("--output cannot be combined with --interactive.")
    else:
        output_path = Path(opt.output or f"fractal.{image_format}").expanduser()
        if output_path.exists() and output_path.is_dir():
            parser.error("--output must point to a file, not a directory.")
        expected_suffix = f".{image_format}"
        if output_path.suffix:
            if output_path.suffix.lower() != expected_suffix.lower():
                parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        else:
            output_path = output_path.with_suffix(expected_suffix)
        image_path = output_path.resolve()

    return RenderConfig(
        mode=mode,
        params=params,
        view=view,
        viewport=Viewport(opt.width, opt.height),
        palette_path=Path(opt.palette).expanduser() if opt.palette else None,
        colormap=opt.colormap,
        backend=opt.backend,
        workers=opt.workers,
        image_path=image_path,
        image_format=image_format,
        interactive=bool(opt.interactive),
        show_coordinates=bool(opt.show_coordinates),
    )


def resolve_palette(config: RenderConfig) -> Palette:
    if config.palette_path is not None:
        return load_palette(config.palette_path)
    try:
        return Palette.from_colormap(config.colormap)
    except KeyError:
        print(f"Unknown colormap '{config.colormap}', using {DEFAULT_COLORMAP}.")
        return Palette.from_colormap(DEFAULT_COLORMAP)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG" and image.mode == "RGBA":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
)


def _load_annotation_font(image: PIL.Image.Image) -> PIL.ImageFont.ImageFont:
    target_size = max(12, int(round(max(min(image.size), 1) * 0.028)))
    for path in _FONT_CANDIDATES:
        font_path = Path(path)
        if font_path.exists():
            try:
                return PIL.ImageFont.truetype(str(font_path), target_size)
            except OSError:
                continue
    return PIL.ImageFont.load_default()


def annotate_with_coordinates(image: PIL.Image.Image, snapshot: FrameSnapshot) -> PIL.Image.Image:
    """Overlay the view center, side and recurrence parameters on ``image``."""

    if image.mode != "RGBA":
        image = image.convert("RGBA")

    lines = [
        f"{snapshot.mode.value.capitalize()}  z^{snapshot.params.power:.6g}",
        f"Center: ({snapshot.center_x:.6g}, {snapshot.center_y:.6g})",
        f"Side: {snapshot.side:.6g}",
    ]
    if snapshot.mode is FractalMode.JULIA:
        seed = snapshot.params.julia_seed
        lines.append(f"Seed: {seed.real:.6g}{seed.imag:+.6g}i")
    text = "\n".join(lines)

    overlay = PIL.Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = PIL.ImageDraw.Draw(overlay)
    font = _load_annotation_font(image)
    spacing = 4
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, spacing=spacing)
    padding = 8
    box = [(12, 12), (12 + right - left + padding * 2, 12 + bottom - top + padding * 2)]
    draw.rounded_rectangle(box, radius=10, fill=(10, 12, 24, 170), outline=(255, 255, 255, 45))
    origin = (12 + padding - left, 12 + padding - top)
    draw.multiline_text((origin[0] + 1, origin[1] + 1), text, font=font, fill=(0, 0, 0, 170), spacing=spacing)
    draw.multiline_text(origin, text, font=font, fill=(240, 244, 255, 255), spacing=spacing)
    return PIL.Image.alpha_composite(image, overlay)


def render_image(config: RenderConfig, palette: Palette, device: str | None = None) -> PIL.Image.Image:
    snapshot = config.view.snapshot(config.params, config.viewport)
    result = render_frame(
        snapshot,
        palette,
        backend=config.backend,
        workers=config.workers,
        device=device,
    )
    gradient = np.count_nonzero((result.values > 0.0) & (result.values < 1.0))
    log("colored pixels: %d of %d" % (gradient, result.values.size))

    image = PIL.Image.fromarray(result.rgba)
    if config.show_coordinates:
        image = annotate_with_coordinates(image, snapshot)
    return image


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    logging.basicConfig(level=logging.DEBUG if VERBOSE else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    config = resolve_render_config(opt, parser)
    palette = resolve_palette(config)
    device = select_device(config.backend)

    if config.interactive:
        from multibrot.viewer import FractalViewer

        viewer = FractalViewer(
            config.viewport,
            config.params,
            view=config.view,
            palette=palette,
            backend=config.backend,
            workers=config.workers,
            device=device,
        )
        viewer.run()
        return

    image = render_image(config, palette, device)
    write_single_image(image, config.image_path, config.image_format)
    print(f"wrote {config.image_path}")


if __name__ == '__main__':
    main()
