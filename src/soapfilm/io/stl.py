"""STL export for relaxed soapfilm surfaces.

Binary files are packed in one go from a numpy record array laid out like
the on-disk facet record (12 little-endian floats and a 16-bit attribute
word, 50 bytes in all).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

import numpy as np

from soapfilm.mesh import Triangle, mesh_view, triangles_from_mesh

_HEADER_SIZE = 80

FACET_DTYPE = np.dtype([
    ('normal', '<f4', (3,)),
    ('vertices', '<f4', (3, 3)),
    ('attribute', '<u2'),
])


@contextmanager
def _open_stream(path_or_file, mode: str):
    if hasattr(path_or_file, 'write'):
        yield path_or_file
        return
    encoding = None if 'b' in mode else 'ascii'
    with open(path_or_file, mode, encoding=encoding) as stream:
        yield stream


def write_stl(obj, path_or_file, *, binary: bool = True, name: str = 'soapfilm') -> int:
    """Write ``obj`` (patch, topology or iterable of patches) to STL.

    ``path_or_file`` can be a filesystem path or an open binary/text stream.
    Returns the number of triangles written.
    """

    triangles = list(triangles_from_mesh(mesh_view(obj)))
    with _open_stream(path_or_file, 'wb' if binary else 'w') as stream:
        if binary:
            stream.write(binary_stl(triangles, name))
        else:
            stream.writelines(ascii_stl(triangles, name))
    return len(triangles)


def facet_records(triangles: List[Triangle]) -> np.ndarray:
    records = np.zeros(len(triangles), dtype=FACET_DTYPE)
    if triangles:
        records['normal'] = [tri.normal for tri in triangles]
        records['vertices'] = [(tri.v0, tri.v1, tri.v2) for tri in triangles]
    return records


def binary_stl(triangles: List[Triangle], name: str) -> bytes:
    header = name[:_HEADER_SIZE].encode('ascii', errors='replace').ljust(_HEADER_SIZE, b' ')
    count = np.array([len(triangles)], dtype='<u4')
    return header + count.tobytes() + facet_records(triangles).tobytes()


def _xyz(v) -> str:
    return ' '.join(f'{c:.6e}' for c in v)


def ascii_stl(triangles: List[Triangle], name: str) -> Iterator[str]:
    """Yield the lines of an ASCII STL solid, newline-terminated."""
    yield f'solid {name}\n'
    for tri in triangles:
        yield f'  facet normal {_xyz(tri.normal)}\n'
        yield '    outer loop\n'
        for v in (tri.v0, tri.v1, tri.v2):
            yield f'      vertex {_xyz(v)}\n'
        yield '    endloop\n'
        yield '  endfacet\n'
    yield f'endsolid {name}\n'


__all__ = ['FACET_DTYPE', 'ascii_stl', 'binary_stl', 'write_stl']
