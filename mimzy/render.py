"""Load a Wavefront model, ray trace it with a shaded light and save the picture as PPM."""

from __future__ import annotations

import argparse
import os
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from mimzy.kdtree import KDTree
from mimzy.ray import Hit, Ray
from mimzy.triangle import Triangle
from mimzy.vector import Vector3

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_DEPTH = 8
DEFAULT_OUTPUT = "output.ppm"

_CAMERA = Vector3(0.0, 0.0, 9.0)
_LIGHT = Vector3(10.0, 1.0, 10.0).normalized()
_AMBIENT = 0.2
_DIFFUSE = 0.5

PathLike = Union[str, "os.PathLike[str]"]


class _Intersector(Protocol):
    def intersect(self, ray: Ray) -> Optional[Hit]:
        ...


def _resolve_index(token: str, vertex_count: int, line_number: int) -> int:
    index_text = token.split("/", 1)[0]
    try:
        index = int(index_text)
    except ValueError:
        raise ValueError(f"line {line_number}: bad vertex index {token!r}") from None
    if index > 0:
        resolved = index - 1
    elif index < 0:
        resolved = vertex_count + index
    else:
        raise ValueError(f"line {line_number}: vertex index 0 is not allowed")
    if not 0 <= resolved < vertex_count:
        raise ValueError(f"line {line_number}: vertex index {index} is out of range")
    return resolved


def load_wavefront(path: PathLike) -> List[Vector3]:
    """Corner positions of every face in a Wavefront OBJ file, three per triangle.

    Polygons with more than three corners are split into a fan of triangles.
    """
    vertices: List[Vector3] = []
    corners: List[Vector3] = []
    with open(path, encoding="utf-8") as stream:
        for line_number, raw in enumerate(stream, start=1):
            fields = raw.split("#", 1)[0].split()
            if not fields:
                continue
            keyword, arguments = fields[0], fields[1:]
            if keyword == "v":
                if len(arguments) < 3:
                    raise ValueError(f"line {line_number}: a vertex needs three coordinates")
                try:
                    x, y, z = (float(value) for value in arguments[:3])
                except ValueError:
                    raise ValueError(f"line {line_number}: bad vertex {raw.strip()!r}") from None
                vertices.append(Vector3(x, y, z))
            elif keyword == "f":
                if len(arguments) < 3:
                    raise ValueError(f"line {line_number}: a face needs at least three corners")
                face = [
                    vertices[_resolve_index(token, len(vertices), line_number)]
                    for token in arguments
                ]
                for second, third in zip(face[1:-1], face[2:]):
                    corners.extend((face[0], second, third))
    return corners


def build_triangles(positions: Sequence[Vector3]) -> List[Triangle]:
    """Group consecutive positions into triangles."""
    if len(positions) % 3:
        raise ValueError(f"{len(positions)} positions do not make whole triangles")
    corners = iter(positions)
    return [Triangle(p0, p1, p2) for p0, p1, p2 in zip(corners, corners, corners)]


def _shade(hit: Optional[Hit]) -> int:
    if hit is None:
        return 0
    cosine = hit.normal.dot(_LIGHT)
    color = Vector3.splat(_AMBIENT) + max(cosine, 0.0) * Vector3.splat(_DIFFUSE)
    r, g, b = (int(channel * 255.0) & 0xFF for channel in color)
    return (r << 24) | (g << 16) | (b << 8) | 0xFF


def render(tree: _Intersector, width: int, height: int) -> List[int]:
    """Trace one ray per pixel from a fixed camera; pixels are RGBA8888, row by row.

    Pixels where nothing is hit are zero.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, not {width}x{height}")
    pixels = []
    for y in range(height):
        v = 2.0 * y / height - 1.0
        for x in range(width):
            u = 2.0 * x / width - 1.0
            ray = Ray(_CAMERA, Vector3(u, -v, -1.0).normalized())
            pixels.append(_shade(tree.intersect(ray)))
    return pixels


def write_ppm(path: PathLike, width: int, height: int, pixels: Iterable[int]) -> None:
    """Write RGBA8888 pixels, row by row, as a plain-text PPM image."""
    values = list(pixels)
    if len(values) != width * height:
        raise ValueError(f"{len(values)} pixels do not fill a {width}x{height} image")
    with open(path, "w", encoding="ascii") as out:
        out.write(f"P3\n{width} {height}\n255\n")
        for color in values:
            out.write(f"{(color >> 24) & 0xFF} {(color >> 16) & 0xFF} {(color >> 8) & 0xFF}\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Render a model file to a PPM image."""
    parser = argparse.ArgumentParser(description="Ray trace a Wavefront OBJ model.")
    parser.add_argument("model", nargs="?", help="path of the OBJ file")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="path of the PPM image")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH)
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT)
    parser.add_argument("--depth", type=int, default=DEFAULT_DEPTH, help="k-d tree depth")
    arguments = parser.parse_args(argv)
    if arguments.model is None:
        return 0

    triangles = build_triangles(load_wavefront(arguments.model))
    tree = KDTree(triangles)
    tree.build(arguments.depth)
    image = render(tree, arguments.width, arguments.height)
    write_ppm(arguments.output, arguments.width, arguments.height, image)
    return 0