# src/terasm/encoding.py
from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from .ast import Reg, Imm, Sym, Mem, Operand, Resolved, AbsoluteRef, RelativeRef, Slot
from .isa import Family, lookup, data_width
from .lexer import is_label_name
from .numerals import encode as encode_numeral
from .regs import is_reg, normalize_reg, reg_trit
from .diagnostics import DestinationMismatch, IllegalOperands, WrongOperandCount

# ---------------- Plantillas por familia ----------------
#
# Cada plantilla: (trytes fijos, operandos cuyo inmediato va detrás).
# En los trytes fijos, 'A'/'B'/'C' son el trit de registro del operando 1/2/3,
# 'x'/'y' los trits selectores de la familia y 'p' la acción de ADD/ADC.
# El primer trit del opcode indica la longitud total: λ=3, 0=4, 1=5 trytes.

Template = Tuple[Tuple[str, ...], Tuple[int, ...]]

MOV_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r", "r"):     (("λ0000λ", "00000A", "0B1000"), ()),
    ("[r]", "r"):   (("λ0000λ", "0000A0", "λB1000"), ()),
    ("[i]", "r"):   (("00000λ", "000000", "λB1010"), (0,)),
    ("r", "[r]"):   (("λ0000λ", "0000BA", "000λ01"), ()),
    ("i", "[r]"):   (("10000λ", "0000B0", "000001", "000000"), (0,)),
    ("r", "[i]"):   (("00000λ", "00000A", "000λ11"), (1,)),
    ("i", "[i]"):   (("10000λ", "000000", "000011"), (1, 0)),
}

FILL_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r",):         (("λ0x00λ", "000000", "0Aλ000"), ()),
    ("[r]",):       (("λ0x00λ", "0000A0", "00000λ"), ()),
    ("[i]",):       (("00x00λ", "000000", "00001λ"), (0,)),
    ("r", "[r]"):   (("λ0x00λ", "0000B0", "0Aλ00λ"), ()),
    ("r", "[i]"):   (("00x00λ", "000000", "0Aλ01λ"), (1,)),
}

XTI_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r", "r"):     (("λ0000λ", "λx000A", "1B1100"), ()),
    ("r", "[r]"):   (("λ0000λ", "λx00BA", "000101"), ()),
    ("r", "[i]"):   (("00000λ", "λx000A", "000111"), (1,)),
    ("[r]", "r"):   (("λ0000λ", "λx00A0", "1B1000"), ()),
    ("[i]", "r"):   (("00000λ", "λx0000", "1B1010"), (0,)),
}

# Compartida por ADD/ADC y las operaciones lógicas (NAND, NOR, ...)
ARITH_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r", "r", "r"):     (("λ00p0λ", "xy00BA", "1C1000"), ()),
    ("r", "r", "[i]"):   (("000p0λ", "xy00BA", "000111"), (2,)),
    ("r", "i", "[i]"):   (("100p0λ", "xy0λ0A", "000111"), (2, 1)),
    ("r", "i", "r"):     (("000p0λ", "xy010A", "1C1000"), (1,)),
    ("r", "i", "[r]"):   (("000p0λ", "xy00CA", "000101"), (1,)),
    ("[r]", "i", "r"):   (("000p0λ", "xyλ1A0", "1C1000"), (1,)),
    ("[i]", "i", "r"):   (("100p0λ", "xyλλ00", "1C1010"), (0, 1)),
    ("[i]", "r", "r"):   (("000p0λ", "xyλ0B0", "1C1010"), (0,)),
}

CMP_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r", "r"):     (("λ00λ0λ", "0000BA", "000000"), ()),
    ("r", "i"):     (("000λ0λ", "00010A", "000000"), (1,)),
    ("[r]", "i"):   (("000λ0λ", "00λ1A0", "000000"), (1,)),
    ("[i]", "r"):   (("000λ0λ", "00λ0B0", "000010"), (0,)),
    ("[i]", "i"):   (("100λ0λ", "00λλ00", "000010"), (0, 1)),
}

JXX_TABLE: Dict[Tuple[str, ...], Template] = {
    ("r",):         (("λ100yx", "0000A0", "000000"), ()),
    ("i",):         (("0100yx", "000100", "000000"), (0,)),
    ("i", "r"):     (("0100yx", "0000B0", "000000"), (0,)),
    ("i", "i"):     (("1100yx", "000λ00", "000000"), (0, 1)),
}

RESTART_TABLE: Dict[Tuple[str, ...], Template] = {
    (): (("λλ0λ0λ", "100000", "00λ000"), ()),
}

TABLES: Dict[str, Dict[Tuple[str, ...], Template]] = {
    "mov": MOV_TABLE,
    "fill": FILL_TABLE,
    "xti": XTI_TABLE,
    "adx": ARITH_TABLE,
    "alu": ARITH_TABLE,
    "cmp": CMP_TABLE,
    "jxx": JXX_TABLE,
    "restart": RESTART_TABLE,
}

_REG_LETTERS = "ABC"

# ---------------- Operandos ----------------

def _classify_plain(token: str) -> Operand:
    if is_reg(token):
        name = normalize_reg(token)
        return Reg(name=name, trit=reg_trit(name))
    if is_label_name(token):
        return Sym(token)
    return Imm(tryte=encode_numeral(token, 1)[0], text=token)

def classify(token: str) -> Operand:
    """Registro, etiqueta, literal o acceso a memoria '[...]'."""
    t = token.strip()
    if len(t) >= 2 and t.startswith("[") and t.endswith("]"):
        return Mem(_classify_plain(t[1:-1].strip()))
    return _classify_plain(t)

def shape(op: Operand) -> str:
    """Forma del operando: 'r', 'i', '[r]' o '[i]'."""
    if isinstance(op, Mem):
        return "[r]" if isinstance(op.target, Reg) else "[i]"
    return "r" if isinstance(op, Reg) else "i"

def _reg_of(op: Operand) -> Optional[str]:
    inner = op.target if isinstance(op, Mem) else op
    return inner.trit if isinstance(inner, Reg) else None

def _imm_slot(op: Operand, *, relative: bool) -> Slot:
    inner = op.target if isinstance(op, Mem) else op
    if isinstance(inner, Sym):
        return RelativeRef(inner.name) if relative else AbsoluteRef(inner.name)
    if isinstance(inner, Imm):
        return Resolved(inner.tryte)
    raise ValueError(f"el operando {op!r} no lleva inmediato")

def _fields(fam: Family, sel: Tuple[str, ...]) -> Dict[str, str]:
    if fam.kind == "adx":
        return {"p": sel[0], "x": "1", "y": "0"}
    if fam.kind == "alu":
        return {"p": "0", "x": sel[0], "y": sel[1]}
    out: Dict[str, str] = {}
    for letter, trit in zip("xy", sel):
        out[letter] = trit
    return out

def _fill(pattern: str, fields: Dict[str, str]) -> str:
    return "".join(fields.get(ch, ch) for ch in pattern)

def _render(mnemonic: str, sources: List[str], destination: Optional[str]) -> str:
    s = mnemonic
    if sources:
        s += " " + ", ".join(sources)
    if destination is not None:
        s += f" → {destination}"
    return s

# ---------------- Codificador principal ----------------

def encode_instruction(mnemonic: str, sources: List[str],
                       destination: Optional[str] = None) -> Tuple[Slot, ...]:
    """Codifica una instrucción en huecos de tryte (resueltos o diferidos).

    `sources` son los operandos a la izquierda del marcador de destino y
    `destination` el de la derecha (None si la línea no tiene marcador).
    """
    fam, sel = lookup(mnemonic)
    name = mnemonic.lower()
    text = _render(name, sources, destination)

    if fam.destination and destination is None:
        raise DestinationMismatch(f"<{name}> debe tener destino", hint="use '→' (o '->')")
    if not fam.destination and destination is not None:
        raise DestinationMismatch(f"<{name}> no admite destino")

    tokens = list(sources) + ([destination] if destination is not None else [])
    lo, hi = fam.arity
    if not lo <= len(tokens) <= hi:
        expected = str(lo) if lo == hi else f"{lo} o {hi}"
        raise WrongOperandCount(f"<{name}> espera {expected} operando(s), recibió {len(tokens)}: <{text}>")

    ops = [classify(t) for t in tokens]
    key = tuple(shape(op) for op in ops)
    template = TABLES[fam.kind].get(key)
    if template is None:
        raise IllegalOperands(f"<{text}> no permitido")
    patterns, trailing = template

    fields = _fields(fam, sel)
    for letter, op in zip(_REG_LETTERS, ops):
        trit = _reg_of(op)
        if trit is not None:
            fields[letter] = trit

    slots: List[Slot] = [Resolved(_fill(p, fields)) for p in patterns]
    relative = fam.kind == "jxx"
    for idx in trailing:
        slots.append(_imm_slot(ops[idx], relative=relative))
    return tuple(slots)

def encode_data(type_name: str, values: List[str]) -> Tuple[Slot, ...]:
    """Codifica una directiva de datos: cada literal ocupa el ancho del tipo,
    cada etiqueta un tryte con su dirección."""
    width = data_width(type_name)
    if not values:
        raise WrongOperandCount(f"directiva '{type_name}' sin valores")
    slots: List[Slot] = []
    for v in values:
        if is_label_name(v):
            slots.append(AbsoluteRef(v))
        else:
            slots.extend(Resolved(t) for t in encode_numeral(v, width))
    return tuple(slots)
