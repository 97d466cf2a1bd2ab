"""
Reference material for the assistant's system instruction.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from clprompt.infra.config.logging_config import get_logger

CL_DOCS_LIMIT = 14000
EXTRA_DOCS_LIMIT = 12000
DOCS_FOLDER_LIMIT = 25000
TEXT_EXTENSIONS = (".md", ".txt", ".json")
PDF_EXTENSION = ".pdf"

PathLike = Union[str, Path]

_log = get_logger("infra.context")


def read_prefix(path: Optional[PathLike], limit: int) -> str:
    """First ``limit`` characters of a text file, or "" when it is missing."""
    if not path:
        return ""
    p = Path(path)
    if not p.is_file():
        return ""
    try:
        return p.read_text(encoding="utf-8")[:limit]
    except (OSError, UnicodeDecodeError) as e:
        _log.warning("context.read_failed", path=str(p), error=str(e))
        return ""


def extract_pdf_text(path: Path) -> str:
    try:
        reader = PdfReader(str(path))
        return "\n".join(page.extract_text() or "" for page in reader.pages)
    except (OSError, PyPdfError, ValueError) as e:
        _log.warning("context.pdf_unreadable", path=str(path), error=str(e))
        return ""


class ReferenceContext:
    """
    Reads the CL docs, extra notes and the Docs folder on each request.

    Extracted PDF text is cached per file until its mtime or size changes.
    """

    def __init__(
        self,
        cl_docs_path: Optional[PathLike] = "cl-docs.md",
        extra_docs_path: Optional[PathLike] = "dezzy-docs.md",
        docs_folder: Optional[PathLike] = "Docs",
    ):
        self.cl_docs_path = cl_docs_path
        self.extra_docs_path = extra_docs_path
        self.docs_folder = docs_folder
        self._pdf_cache: Dict[Path, Tuple[int, int, str]] = {}

    def cl_docs(self) -> str:
        return read_prefix(self.cl_docs_path, CL_DOCS_LIMIT)

    def extra_docs(self) -> str:
        return read_prefix(self.extra_docs_path, EXTRA_DOCS_LIMIT)

    def docs_folder_text(self) -> str:
        """Every readable doc in the folder, by name, each under a ``--- name ---`` header."""
        if not self.docs_folder:
            return ""
        folder = Path(self.docs_folder)
        if not folder.is_dir():
            return ""

        parts: List[str] = []
        for entry in sorted(folder.iterdir(), key=lambda p: p.name):
            if not entry.is_file():
                continue
            ext = entry.suffix.lower()
            raw = ""
            if ext in TEXT_EXTENSIONS:
                raw = read_prefix(entry, DOCS_FOLDER_LIMIT)
            elif ext == PDF_EXTENSION:
                raw = self._pdf_text(entry)
            if raw:
                parts.append(f"--- {entry.name} ---\n{raw}")
        return "\n\n".join(parts)[:DOCS_FOLDER_LIMIT]

    def _pdf_text(self, path: Path) -> str:
        try:
            stat = path.stat()
        except OSError:
            return ""
        cached = self._pdf_cache.get(path)
        if cached and cached[:2] == (stat.st_mtime_ns, stat.st_size):
            return cached[2]
        text = extract_pdf_text(path)
        self._pdf_cache[path] = (stat.st_mtime_ns, stat.st_size, text)
        return text
