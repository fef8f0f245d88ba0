from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .trits import NEG
from .regs import is_reg
from .diagnostics import DestinationMismatch, InvalidLabelName, warning

logger = logging.getLogger(__name__)

COMMENT_MARKER = ";"
SECTION_CODE = ".code"
SECTION_DATA = ".data"
DESTINATION_MARKERS = ("→", "->")

@dataclass(frozen=True)
class SourceLine:
    """Non-empty, comment-free source line tagged with its section."""
    line: int
    section: str    # 'code' or 'data'
    text: str

def strip_comment(line: str, marker: str = COMMENT_MARKER) -> str:
    """Remove everything from the comment marker on, then trim."""
    i = line.find(marker)
    if i != -1:
        line = line[:i]
    return line.strip()

def is_label_name(name: str) -> bool:
    """First char alphabetic (and not the negative trit), rest alphanumeric or '_'."""
    if not name or not name[0].isalpha() or name[0] == NEG:
        return False
    return all(ch.isalnum() or ch == "_" for ch in name)

def split_label(line: str) -> Tuple[Optional[str], str]:
    """Return (label, rest) if line has 'label:', else (None, line)."""
    i = line.find(":")
    if i == -1:
        return None, line
    label = line[:i].strip()
    if not is_label_name(label) or is_reg(label):
        raise InvalidLabelName(f"Nombre de etiqueta inválido: '{label}'")
    return label, line[i + 1:].strip()

def split_mnemonic_operands(line: str):
    s = line.strip()
    if not s:
        return "", ""
    parts = s.split(None, 1)
    if len(parts) == 1:
        return parts[0].lower(), ""
    return parts[0].lower(), parts[1].strip()

def split_destination(body: str, markers=DESTINATION_MARKERS) -> Tuple[str, Optional[str]]:
    """Split 'srcs → dst' into ('srcs', 'dst'); ('srcs', None) without a marker."""
    found = [(body.find(m), m) for m in markers if m in body]
    count = sum(body.count(m) for m in markers)
    if count == 0:
        return body, None
    if count > 1:
        raise DestinationMismatch(f"más de un destino en '{body}'")
    pos, marker = found[0]
    return body[:pos].strip(), body[pos + len(marker):].strip()

def split_operands(op_str: str) -> List[str]:
    if not op_str:
        return []
    # split by commas or blanks, but not inside brackets
    out = []
    cur = []
    depth = 0
    for ch in op_str:
        if ch == '[':
            depth += 1
            cur.append(ch)
        elif ch == ']':
            depth = max(0, depth-1)
            cur.append(ch)
        elif (ch == ',' or ch.isspace()) and depth == 0:
            s = ''.join(cur).strip()
            if s:
                out.append(s)
            cur = []
        else:
            cur.append(ch)
    s = ''.join(cur).strip()
    if s:
        out.append(s)
    return out

def scan(text: str, *, comment: str = COMMENT_MARKER,
         filename: str | None = None) -> Iterator[SourceLine]:
    """Yield the meaningful lines of a source, switching on '.code' / '.data'."""
    section: Optional[str] = None
    # sólo '\n' (y '\r\n') cortan línea; un '\f' suelto no debe desplazar la numeración
    for lineno, raw in enumerate(text.split("\n"), start=1):
        core = strip_comment(raw.rstrip("\r"), comment)
        if not core:
            continue
        if core == SECTION_CODE:
            section = "code"
            continue
        if core == SECTION_DATA:
            section = "data"
            continue
        if section is None:
            logger.warning("%s", warning("línea fuera de sección, ignorada",
                                         line=lineno, file=filename,
                                         hint=f"añade {SECTION_CODE} o {SECTION_DATA} antes"))
            continue
        yield SourceLine(line=lineno, section=section, text=core)
