"""
Decoder for the fixed-header binary model format (.mdl, "IDST").

Only the texture tables are read:

    0x000  char[4]  signature "IDST"
    0x004  200 bytes of header fields we do not need
    0x0CC  i32      texture_count
    0x0D0  i32      texture_offset
    0x0D4  i32      texturedir_count
    0x0D8  i32      texturedir_offset

texturedir_offset points at an i32 holding the absolute offset of the
directory string table. texture_offset points at an i32 holding the offset of
the texture name table relative to texture_offset itself. Both tables are runs
of NUL-terminated UTF-8 strings.
"""
from __future__ import annotations

import struct
from typing import List

from addonpacker.core.paths import normalize_relpath
from addonpacker.errors import EncodingError, SignatureError, TruncationError
from addonpacker.models import DecodedModel

MODEL_SIGNATURE = b"IDST"
MODEL_EXT = "mdl"
MATERIAL_EXTS = ("vtf", "vmt")

# Upper bound on directory x texture pairs; real models stay far below it.
MAX_TEXTURE_PAIRS = 65536

_SKIPPED_HEADER_BYTES = 200
_INT = struct.Struct("<i")


class ModelReader:
    """Bounds-checked cursor over an in-memory model blob."""

    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def seek(self, offset: int) -> None:
        if offset < 0:
            raise TruncationError(f"negative offset {offset}")
        self.offset = offset

    def skip(self, count: int) -> None:
        self.seek(self.offset + count)

    def read_bytes(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise TruncationError(
                f"need {size} byte(s) at offset {self.offset}, buffer is {len(self.data)} byte(s)"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def read_int(self) -> int:
        return _INT.unpack(self.read_bytes(_INT.size))[0]

    def read_count(self, what: str) -> int:
        n = self.read_int()
        if n < 0:
            raise TruncationError(f"negative {what} ({n})")
        return n

    def read_stringz(self) -> str:
        if self.offset > len(self.data):
            raise TruncationError(f"string offset {self.offset} is past the end of the buffer")
        end = self.data.find(b"\x00", self.offset)
        if end == -1:
            raise TruncationError(f"unterminated string at offset {self.offset}")
        raw = self.data[self.offset:end]
        try:
            s = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError(f"invalid UTF-8 string at offset {self.offset} ({e.reason})") from e
        self.offset = end + 1
        return s

    def read_strings(self, count: int) -> List[str]:
        return [self.read_stringz() for _ in range(count)]


def material_paths(directories: List[str], textures: List[str]) -> List[str]:
    """
    Every material file a model may reference. Both extensions are produced
    for each (directory, texture) pair since the model does not say which one
    exists on disk.
    """
    out: List[str] = []
    for directory in directories:
        for texture in textures:
            for ext in MATERIAL_EXTS:
                out.append(normalize_relpath(f"materials/{directory}{texture}.{ext}"))
    return out


def decode_model(data: bytes) -> DecodedModel:
    """
    Decode the texture tables of a model blob.

    Raises SignatureError, TruncationError or EncodingError (all FormatError);
    never returns a partial result.
    """
    reader = ModelReader(data)

    signature = reader.read_bytes(len(MODEL_SIGNATURE))
    if signature != MODEL_SIGNATURE:
        raise SignatureError(f"bad signature {signature!r}, expected {MODEL_SIGNATURE!r}")

    reader.skip(_SKIPPED_HEADER_BYTES)

    texture_count = reader.read_count("texture count")
    texture_offset = reader.read_int()
    texturedir_count = reader.read_count("texture directory count")
    texturedir_offset = reader.read_int()

    if texture_count * texturedir_count > MAX_TEXTURE_PAIRS:
        raise TruncationError(
            f"{texturedir_count} directories x {texture_count} textures exceeds {MAX_TEXTURE_PAIRS} pairs"
        )

    reader.seek(texturedir_offset)
    reader.seek(reader.read_int())
    directories = reader.read_strings(texturedir_count)

    reader.seek(texture_offset)
    reader.seek(reader.read_int() + texture_offset)
    textures = reader.read_strings(texture_count)

    return DecodedModel(
        directories=directories,
        textures=textures,
        material_paths=material_paths(directories, textures),
    )
