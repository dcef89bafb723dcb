"""Partitioning of a local file into fixed-size byte ranges."""

import re
from typing import List

from common.exceptions import PlanningError
from common.logging_config import get_logger
from common.types import FilePart, LocalFile

logger = get_logger(__name__)

# Last path component, accepting both separators (browser "C:\fakepath\x" names included)
FILENAME_PATTERN = re.compile(r'^(?:.*[\\/])?([^\\/]+)$')


def normalize_file_name(raw_name: str) -> str:
    """
    Extract the bare file name from a raw, possibly decorated name.

    Args:
        raw_name: Name as reported by the file handle

    Returns:
        Final path component with surrounding whitespace stripped

    Raises:
        PlanningError: If no usable name can be extracted
    """
    match = FILENAME_PATTERN.match(raw_name.strip())
    if not match or not match.group(1).strip():
        raise PlanningError(f"Cannot derive a file name from '{raw_name}'")
    return match.group(1).strip()


def plan_parts(file: LocalFile, part_size: int) -> List[FilePart]:
    """
    Partition a file into contiguous parts of at most part_size bytes.

    Parts are numbered from 0 and tile [0, file.size) in increasing offset
    order; the last part is capped at the file size. An empty file yields
    no parts.

    Args:
        file: File to partition
        part_size: Size of each part in bytes (> 0)

    Returns:
        Ordered list of FilePart descriptors

    Raises:
        PlanningError: If part_size is not positive or the name is unusable
    """
    if part_size <= 0:
        raise PlanningError(f"Part size must be positive, got {part_size}")

    file_name = normalize_file_name(file.name)
    parts = []
    offset = 0
    part_number = 0

    while offset < file.size:
        parts.append(FilePart(
            file_name=file_name,
            part_number=part_number,
            upload_offset=offset,
            upload_length=min(offset + part_size, file.size),
            source=file.path,
        ))
        offset += part_size
        part_number += 1

    logger.debug(f"Planned {len(parts)} part(s) for {file_name} [size={file.size}, part_size={part_size}]")
    return parts
