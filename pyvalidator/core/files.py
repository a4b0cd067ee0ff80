"""
Output file path resolution for results.

Results describe their output files as ``<file_ref>`` entries in their input
XML document. Uploaded files live in a hashed directory hierarchy below the
project's upload directory:

    <upload_dir>/<hex(md5(name)[1:8]) % fanout>/<name>
"""

from __future__ import annotations

import hashlib
import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, List, Optional, Union

from .errors import OutputFileError
from .models import ResultRecord

logger = logging.getLogger(__name__)

DEFAULT_FANOUT = 1024

# Anything that maps a result to its output file paths
OutputFileResolver = Callable[[ResultRecord], List[str]]


def parse_output_file_names(xml_doc_in: str) -> List[str]:
    """Return the <file_name> of every <file_ref> in a result's XML document."""
    if not xml_doc_in or not xml_doc_in.strip():
        return []
    try:
        # The document is a fragment with several top-level elements
        root = ET.fromstring(f"<result_doc>{xml_doc_in}</result_doc>")
    except ET.ParseError as e:
        raise OutputFileError(f"Cannot parse result XML: {e}") from e

    names: List[str] = []
    for ref in root.iter("file_ref"):
        name = (ref.findtext("file_name") or "").strip()
        if not name:
            raise OutputFileError("file_ref without file_name")
        names.append(name)
    return names


def filename_hash(filename: str, fanout: int) -> int:
    digest = hashlib.md5(filename.encode("utf-8")).hexdigest()
    return int(digest[1:8], 16) % fanout


def dir_hier_path(filename: str, root: Union[str, Path], fanout: int = DEFAULT_FANOUT) -> Path:
    """Location of ``filename`` in the hashed upload hierarchy below ``root``."""
    root = Path(root)
    if fanout <= 0:
        return root / filename
    return root / format(filename_hash(filename, fanout), "x") / filename


class UploadDirResolver:
    """Resolve output files from a result's <file_ref> list into upload paths."""

    def __init__(self, upload_dir: Union[str, Path], fanout: int = DEFAULT_FANOUT):
        self.upload_dir = Path(upload_dir)
        self.fanout = int(fanout)

    def __call__(self, result: ResultRecord) -> List[str]:
        return [
            str(dir_hier_path(name, self.upload_dir, self.fanout))
            for name in parse_output_file_names(result.xml_doc_in)
        ]


class ListedFileResolver:
    """Use the paths listed on the result record as they are."""

    def __call__(self, result: ResultRecord) -> List[str]:
        return list(result.output_files)


def resolver_for(upload_dir: Optional[Union[str, Path]], fanout: int = DEFAULT_FANOUT) -> OutputFileResolver:
    if upload_dir:
        logger.debug(f"Resolving output files below {upload_dir} (fanout {fanout})")
        return UploadDirResolver(upload_dir, fanout)
    return ListedFileResolver()
