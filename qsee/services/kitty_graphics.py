from __future__ import annotations

import base64
from typing import TextIO

from qsee.services.frame_buffer import FrameBuffer


IMAGE_ID = 1
CHUNK_SIZE = 4096
APC_START = "\033_G"
APC_END = "\033\\"


def encode_frame(buffer: FrameBuffer) -> str:
    return base64.b64encode(buffer.to_bytes()).decode("ascii")


def delete_image_command(image_id: int = IMAGE_ID) -> str:
    return f"{APC_START}a=d,d=i,i={image_id};{APC_END}"


def transmit_commands(
    buffer: FrameBuffer,
    image_id: int = IMAGE_ID,
    chunk_size: int = CHUNK_SIZE,
) -> list[str]:
    """Transmit-and-display commands for an RGBA frame.

    Payloads longer than ``chunk_size`` are split; every chunk but the last
    carries ``m=1`` and only the first carries the image keys.
    """
    payload = encode_frame(buffer)
    chunks = [payload[i:i + chunk_size] for i in range(0, len(payload), chunk_size)] or [""]
    commands: list[str] = []
    for index, chunk in enumerate(chunks):
        more = 1 if index < len(chunks) - 1 else 0
        if index == 0:
            keys = f"a=T,f=32,s={buffer.width},v={buffer.height},i={image_id},q=2,m={more}"
        else:
            keys = f"m={more}"
        commands.append(f"{APC_START}{keys};{chunk}{APC_END}")
    return commands


def display_frame(stream: TextIO, buffer: FrameBuffer, col_offset: int) -> None:
    """Replace image ``IMAGE_ID`` with ``buffer`` at row 1, column ``col_offset``."""
    stream.write(delete_image_command())
    stream.write(f"\033[1;{col_offset}H")
    for command in transmit_commands(buffer):
        stream.write(command)
    stream.flush()


def clear_graphics(stream: TextIO) -> None:
    stream.write(delete_image_command())
    stream.flush()
