# src/terasm/parser.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from .lexer import (
    COMMENT_MARKER,
    scan,
    split_label,
    split_destination,
    split_mnemonic_operands,
    split_operands,
)
from .ast import Unit, Program
from .encoding import encode_instruction, encode_data
from .diagnostics import AssemblyError, DuplicateLabel, warning

logger = logging.getLogger(__name__)

def _code_slots(body: str):
    left, dst = split_destination(body)
    mnemonic, op_str = split_mnemonic_operands(left)
    return encode_instruction(mnemonic, split_operands(op_str), dst)

def _data_slots(body: str):
    type_name, rest = split_mnemonic_operands(body)
    return encode_data(type_name, split_operands(rest))

def parse(text: str, *, filename: Optional[str] = None, comment: str = COMMENT_MARKER,
          allow_redefinition: bool = False) -> Program:
    """
    Construye el programa: arena de unidades en orden de fuente y tabla de etiquetas.

    Reglas:
      - Secciones: '.code' / '.data' en una línea propia, pueden alternarse.
      - Comentarios: desde `comment` hasta fin de línea.
      - Etiquetas: 'name:' al inicio; una etiqueta sola genera una unidad vacía
        que toma la dirección de lo siguiente en su segmento.
      - Las etiquetas se registran aquí, antes de existir direcciones.
    """
    units: List[Unit] = []
    labels: Dict[str, int] = {}

    for src in scan(text, comment=comment, filename=filename):
        try:
            label, body = split_label(src.text)
            if label is not None and label in labels:
                prev = units[labels[label]].line
                if not allow_redefinition:
                    raise DuplicateLabel(f"Etiqueta redefinida: {label}",
                                         hint=f"definida antes en la línea {prev}")
                logger.warning("%s", warning(f"etiqueta '{label}' redefinida (antes en línea {prev})",
                                             line=src.line, file=filename))
            if not body:
                slots = ()
            elif src.section == "code":
                slots = _code_slots(body)
            else:
                slots = _data_slots(body)
        except AssemblyError as exc:
            raise exc.at(src.line, filename)

        if label is not None:
            labels[label] = len(units)
        units.append(Unit(section=src.section, slots=slots, line=src.line,
                          text=body, label=label))
        logger.debug("línea %d: unidad de %s con %d trytes", src.line, src.section, len(slots))

    return Program(units=tuple(units), labels=labels, filename=filename)
