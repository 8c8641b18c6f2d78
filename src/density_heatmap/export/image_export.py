"""Image export: heatmap pixels -> PIL image, PNG file, or standalone HTML."""

from __future__ import annotations

import base64
import io
import logging
import pathlib
from typing import TYPE_CHECKING

import jinja2
import numpy as np
from PIL import Image

if TYPE_CHECKING:
    from ..api import Heatmap

LOGGER = logging.getLogger(__name__)

_TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"


def _require_pixels(heatmap: Heatmap) -> None:
    if heatmap.width == 0 or heatmap.height == 0:
        raise ValueError(
            f"Cannot export a {heatmap.width}x{heatmap.height} heatmap: "
            "it has no pixels."
        )


def to_image(heatmap: Heatmap) -> Image.Image:
    """Current heatmap pixels as an RGBA image."""
    return Image.fromarray(heatmap.to_array())


def save_png(heatmap: Heatmap, path: str | pathlib.Path) -> None:
    """Write the current heatmap pixels to a PNG file."""
    _require_pixels(heatmap)
    path = pathlib.Path(path)
    to_image(heatmap).save(path, format="PNG")
    LOGGER.debug("Wrote %dx%d PNG to %s", heatmap.width, heatmap.height, path)


def color_bar_image(lut: np.ndarray) -> Image.Image:
    """A 1-pixel-wide vertical strip of the lookup table, level 255 on top."""
    strip = np.ascontiguousarray(lut[::-1].reshape(-1, 1, 4), dtype=np.uint8)
    return Image.fromarray(strip)


def _png_b64(image: Image.Image) -> str:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


class HTMLExporter:
    """Export a heatmap as a standalone HTML file.

    The page is self-contained: the heatmap and its color bar are embedded
    as base64 PNGs.
    """

    @staticmethod
    def export(
        path: str | pathlib.Path,
        heatmap: Heatmap,
        title: str = "density-heatmap",
    ) -> None:
        """Write a standalone HTML file.

        Parameters
        ----------
        path : str or Path
            Output file path.
        heatmap : Heatmap
        title : str
            HTML page title.
        """
        _require_pixels(heatmap)
        path = pathlib.Path(path)

        env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
            autoescape=jinja2.select_autoescape(["html", "j2"]),
        )
        template = env.get_template("standalone.html.j2")

        html = template.render(
            title=title,
            width=heatmap.width,
            height=heatmap.height,
            n_stops=len(heatmap.color_scale.stops),
            heatmap_png_b64=_png_b64(to_image(heatmap)),
            color_bar_png_b64=_png_b64(color_bar_image(heatmap.gradient_data)),
        )

        path.write_text(html, encoding="utf-8")
        LOGGER.debug("Wrote standalone HTML to %s", path)
