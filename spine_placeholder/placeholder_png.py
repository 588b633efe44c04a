"""Placeholder PNG writers.

Two modes:
- blank: Pillow draws an opaque white RGBA image of the attachment size
- template: a template PNG is copied chunk for chunk

Both store a `spine_data` tEXt chunk directly after IHDR so tools can tell
where a placeholder came from.
"""
import json
import math
import re
import struct
import zlib

from PIL import Image
from PIL.PngImagePlugin import PngInfo

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
METADATA_KEYWORD = 'spine_data'
PLACEHOLDER_COLOR = (255, 255, 255, 255)

_RESERVED_CHARS = re.compile(r'[<>:"/\\|?*]')


def sanitize_filename(name: str) -> str:
    # Replace characters that are invalid on Windows or POSIX
    return _RESERVED_CHARS.sub('_', name)


def _clamp(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    if not math.isfinite(value) or value < 1:
        return 1
    return int(round(value))


def clamp_size(width, height):
    return _clamp(width), _clamp(height)


def metadata_text(metadata):
    if isinstance(metadata, (dict, list)):
        return json.dumps(metadata)
    return str(metadata)


def create_blank_png(path, width, height, metadata=None):
    width, height = clamp_size(width, height)
    img = Image.new('RGBA', (width, height), PLACEHOLDER_COLOR)
    pnginfo = None
    if metadata is not None:
        pnginfo = PngInfo()
        pnginfo.add_text(METADATA_KEYWORD, metadata_text(metadata))
    img.save(path, format='PNG', pnginfo=pnginfo)


def make_chunk(chunk_type, data):
    body = chunk_type + data
    crc = struct.pack('>I', zlib.crc32(body) & 0xFFFFFFFF)
    return struct.pack('>I', len(data)) + body + crc


def iter_chunks(data):
    """Yield (type, raw_chunk_bytes) for every chunk of a PNG file."""
    if data[:8] != PNG_SIGNATURE:
        raise ValueError("Not a PNG file")
    pos = 8
    while pos < len(data):
        if pos + 8 > len(data):
            raise ValueError("Truncated PNG chunk header")
        chunk_len = struct.unpack('>I', data[pos:pos + 4])[0]
        chunk_type = data[pos + 4:pos + 8]
        end = pos + 12 + chunk_len  # 4 len + 4 type + data + 4 crc
        if end > len(data):
            raise ValueError(f"Truncated PNG chunk {chunk_type!r}")
        yield chunk_type, data[pos:end]
        pos = end
        if chunk_type == b'IEND':
            break


def inject_text_chunk(png_bytes, keyword, text):
    """Return `png_bytes` with a tEXt chunk inserted right after IHDR."""
    text_chunk = make_chunk(
        b'tEXt',
        keyword.encode('latin-1') + b'\x00' + text.encode('latin-1', errors='replace'),
    )
    out = [PNG_SIGNATURE]
    injected = False
    for chunk_type, raw in iter_chunks(png_bytes):
        out.append(raw)
        if not injected and chunk_type == b'IHDR':
            out.append(text_chunk)
            injected = True
    if not injected:
        raise ValueError("PNG has no IHDR chunk")
    return b''.join(out)


def create_png_from_template(template_path, out_path, metadata=None):
    with open(template_path, 'rb') as f:
        data = f.read()
    if metadata is not None:
        data = inject_text_chunk(data, METADATA_KEYWORD, metadata_text(metadata))
    else:
        # still validate so a broken template fails here and not inside Spine
        for _ in iter_chunks(data):
            pass
    with open(out_path, 'wb') as f:
        f.write(data)
