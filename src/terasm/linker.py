# src/terasm/linker.py
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Dict, List

from .ast import Program, Unit, Slot, Resolved, AbsoluteRef, RelativeRef
from .isa import ADDRESS_BASE
from .numerals import encode_int
from .diagnostics import UndefinedLabel, ValueOutOfRange

logger = logging.getLogger(__name__)

# ---------- Pasada 1 (asignación de direcciones) ----------

def first_pass(program: Program, *, origin: int = 0) -> Program:
    """Asigna direcciones: todo el código en orden de fuente y, a continuación, los datos."""
    units: List[Unit] = list(program.units)
    address = origin
    for section in ("code", "data"):
        start = address
        for index, unit in enumerate(program.units):
            if unit.section != section:
                continue
            units[index] = replace(unit, address=address)
            address += unit.size
        logger.debug("pasada 1: segmento %s en [%d, %d)", section, start, address)
    return replace(program, units=tuple(units))

def symbol_addresses(program: Program) -> Dict[str, int]:
    """Etiqueta -> dirección (requiere la pasada 1)."""
    out: Dict[str, int] = {}
    for name, index in program.labels.items():
        addr = program.units[index].address
        if addr is None:
            raise ValueError("first_pass no se ha ejecutado")
        out[name] = addr
    return out

# ---------- Pasada 2 (resolución de referencias) ----------

def _target(program: Program, label: str, unit: Unit) -> int:
    index = program.labels.get(label)
    if index is None:
        raise UndefinedLabel(f"Etiqueta no definida: {label}", line=unit.line, file=program.filename)
    return program.units[index].address  # type: ignore[return-value]

def _resolve(program: Program, unit: Unit, slot: Slot, address_base: int) -> Resolved:
    if isinstance(slot, Resolved):
        return slot
    target = _target(program, slot.label, unit)
    if isinstance(slot, AbsoluteRef):
        value = target + address_base
        what = "dirección"
    elif isinstance(slot, RelativeRef):
        # desde el final de la propia instrucción
        value = target - (unit.address + unit.size)  # type: ignore[operator]
        what = "desplazamiento"
    else:
        raise ValueError(f"hueco desconocido: {slot!r}")
    try:
        tryte = encode_int(value, 1)[0]
    except ValueOutOfRange as exc:
        raise ValueOutOfRange(f"{what} de '{slot.label}' ({value}) no cabe en un tryte",
                              line=unit.line, file=program.filename) from exc
    return Resolved(tryte)

def second_pass(program: Program, *, address_base: int = ADDRESS_BASE) -> Program:
    """Sustituye cada referencia diferida por su tryte definitivo."""
    units: List[Unit] = []
    for unit in program.units:
        if unit.address is None:
            raise ValueError("first_pass no se ha ejecutado")
        if unit.resolved:
            units.append(unit)
            continue
        slots = tuple(_resolve(program, unit, s, address_base) for s in unit.slots)
        units.append(replace(unit, slots=slots))
        logger.debug("pasada 2: línea %d resuelta en %d", unit.line, unit.address)
    return replace(program, units=tuple(units))
