"""Scanner for ``@module`` / ``@requires`` / ``@export`` comment directives."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from code_link.models import ModuleDeclaration
from code_link.scanner.base import BaseScanner
from code_link.scanner.comments import iter_comments

logger = logging.getLogger(__name__)

# A directive starts a comment line, after any "*" decoration.
_DIRECTIVE_RE = re.compile(r"^\s*\*?\s*@(module|requires|export)\b[ \t]*(.*)$")
_NAME_SPLIT_RE = re.compile(r"[\s,]+")
_JSDOC_PREFIX = "module:"


def _names(value: str) -> list[str]:
    names = []
    for token in _NAME_SPLIT_RE.split(value.strip()):
        if token.startswith(_JSDOC_PREFIX):
            token = token[len(_JSDOC_PREFIX):]
        if token:
            names.append(token)
    return names


class AnnotationScanner(BaseScanner):
    extensions = (".js",)

    def scan_file(self, file_path: Path) -> list[ModuleDeclaration]:
        source = file_path.read_text(encoding="utf-8", errors="replace")
        return self.scan_source(source, str(file_path))

    def scan_source(self, source: str, path: str) -> list[ModuleDeclaration]:
        """Collect declarations from already-read ``source`` of file ``path``."""
        declarations: list[ModuleDeclaration] = []
        current: ModuleDeclaration | None = None

        for comment in iter_comments(source):
            for offset, text in enumerate(comment.text.splitlines()):
                m = _DIRECTIVE_RE.match(text)
                if not m:
                    continue
                directive, value = m.group(1), m.group(2)
                line_no = comment.line_number + offset
                names = _names(value)

                if directive == "module":
                    if not names:
                        logger.warning("%s:%d: @module without a name", path, line_no)
                        continue
                    current = ModuleDeclaration(
                        module_name=names[0],
                        source=path,
                        line_number=line_no,
                    )
                    declarations.append(current)
                elif current is None:
                    logger.warning(
                        "%s:%d: @%s before any @module, ignored", path, line_no, directive,
                    )
                elif directive == "requires":
                    current.requires.extend(names)
                else:
                    current.exports.append(names[0] if names else None)

        if not declarations:
            logger.debug("No @module directive in %s", path)
        return declarations
