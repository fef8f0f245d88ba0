import pytest
from src.terasm.encoding import (
    TABLES, classify, shape, encode_instruction, encode_data,
)
from src.terasm.ast import Reg, Imm, Sym, Mem, Resolved, AbsoluteRef, RelativeRef
from src.terasm.numerals import encode_int
from src.terasm.diagnostics import (
    DestinationMismatch, IllegalOperands, InvalidNumeralLiteral, UnknownInstruction,
    ValueOutOfRange, WrongOperandCount,
)

def _enc(line: str):
    """'mov R1 → R0' -> encode_instruction('mov', ['R1'], 'R0')"""
    left, _, dst = line.partition("→")
    parts = left.replace(",", " ").split()
    return encode_instruction(parts[0], parts[1:], dst.strip() or None)

def _r(*trytes):
    return tuple(Resolved(t) for t in trytes)

T5 = encode_int(5)[0]
T7 = encode_int(7)[0]

# --- clasificación de operandos ---

def test_classify():
    assert classify("r1") == Reg("R1", "1")
    assert classify("[ RZ ]") == Mem(Reg("RZ", "λ"))
    assert classify("[LBL]") == Mem(Sym("LBL"))
    assert classify("0t1") == Imm("000001", "0t1")
    assert classify("START") == Sym("START")
    assert [shape(classify(t)) for t in ("R0", "5", "[R1]", "[X]")] == ["r", "i", "[r]", "[i]"]

# --- plantillas concretas ---

@pytest.mark.parametrize("line, expected", [
    ("mov R1 → R0",        _r("λ0000λ", "000001", "001000")),
    ("mov [RZ] → R1",      _r("λ0000λ", "0000λ0", "λ11000")),
    ("mov [5] → R0",       _r("00000λ", "000000", "λ01010", T5)),
    ("mov R0 → [R1]",      _r("λ0000λ", "000010", "000λ01")),
    ("mov 5 → [R1]",       _r("10000λ", "000010", "000001", "000000", T5)),
    ("mov RZ → [7]",       _r("00000λ", "00000λ", "000λ11", T7)),
    ("mov 5 → [7]",        _r("10000λ", "000000", "000011", T7, T5)),
    ("fillz R1",           _r("λ0000λ", "000000", "01λ000")),
    ("filln [R0]",         _r("λ0λ00λ", "000000", "00000λ")),
    ("fillp [7]",          _r("00100λ", "000000", "00001λ", T7)),
    ("fillz R1, [RZ]",     _r("λ0000λ", "0000λ0", "01λ00λ")),
    ("nti R1 → RZ",        _r("λ0000λ", "λλ0001", "1λ1100")),
    ("sti R0 → [R1]",      _r("λ0000λ", "λ00010", "000101")),
    ("pti [R1] → R0",      _r("λ0000λ", "λ10010", "101000")),
    ("add R0, R1 → RZ",    _r("λ00λ0λ", "100010", "1λ1000")),
    ("adc R1, 5 → [R0]",   _r("00010λ", "100001", "000101", T5)),
    ("add [7], 5 → R1",    _r("100λ0λ", "10λλ00", "111010", T7, T5)),
    ("nand R0, R1 → R1",   _r("λ0000λ", "0λ0010", "111000")),
    ("ncon [R1], 5 → R0",  _r("00000λ", "01λ110", "101000", T5)),
    ("tmul R1, 5 → [7]",   _r("10000λ", "110λ01", "000111", T7, T5)),
    ("cmp R0, R1",         _r("λ00λ0λ", "000010", "000000")),
    ("cmp R1, 5",          _r("000λ0λ", "000101", "000000", T5)),
    ("cmp [7], 5",         _r("100λ0λ", "00λλ00", "000010", T7, T5)),
    ("je R1",              _r("λ10000", "000010", "000000")),
    ("jg 5, 7",            _r("110010", "000λ00", "000000", T5, T7)),
    ("restart",            _r("λλ0λ0λ", "100000", "00λ000")),
])
def test_templates(line, expected):
    assert _enc(line) == expected

def test_labels_become_deferred_slots():
    assert _enc("fillp R0, [LBL]") == _r("00100λ", "000000", "00λ01λ") + (AbsoluteRef("LBL"),)
    assert _enc("sti [LBL] → R0") == _r("00000λ", "λ00000", "101010") + (AbsoluteRef("LBL"),)
    assert _enc("cmp [X], R1") == _r("000λ0λ", "00λ010", "000010") + (AbsoluteRef("X"),)
    # los saltos son relativos
    assert _enc("jmp LOOP") == _r("01000λ", "000100", "000000") + (RelativeRef("LOOP"),)
    assert _enc("jne LOOP, R0") == _r("010001", "000000", "000000") + (RelativeRef("LOOP"),)

def test_ascii_destination_marker_is_the_caller_business():
    # encode_instruction recibe el destino ya separado
    assert encode_instruction("MOV", ["R1"], "R0") == _enc("mov R1 → R0")

# --- propiedades de las tablas ---

_LEN_BY_TRIT = {"λ": 3, "0": 4, "1": 5}

@pytest.mark.parametrize("kind", sorted(TABLES))
def test_first_trit_encodes_length(kind):
    for key, (patterns, trailing) in TABLES[kind].items():
        assert all(len(p) == 6 and set(p) <= set("λ01ABCxyp") for p in patterns), key
        assert len(patterns) + len(trailing) == _LEN_BY_TRIT[patterns[0][0]], key
        assert len(trailing) == sum(1 for s in key if s in ("i", "[i]")), key

_MNEMONIC = {"mov": "mov", "fill": "fillz", "xti": "pti", "adx": "adc",
             "alu": "nor", "cmp": "cmp", "jxx": "jl", "restart": "restart"}
_DESTINATION = {"mov", "xti", "adx", "alu"}
_SAMPLES = {
    "r":   ("R0", "R1"),
    "i":   ("5", "-7"),
    "[r]": ("[RZ]", "[R1]"),
    "[i]": ("[12]", "[LBL]"),
}

def _operands(key, variant):
    return [_SAMPLES[s][variant] for s in key]

@pytest.mark.parametrize("kind", sorted(_MNEMONIC))
def test_only_designated_slots_vary(kind):
    for key, (patterns, trailing) in TABLES[kind].items():
        outs = []
        for variant in (0, 1):
            toks = _operands(key, variant)
            if kind in _DESTINATION:
                slots = encode_instruction(_MNEMONIC[kind], toks[:-1], toks[-1])
            else:
                slots = encode_instruction(_MNEMONIC[kind], toks)
            assert len(slots) == len(patterns) + len(trailing)
            outs.append(slots)
        for out in outs:
            for i, p in enumerate(patterns):
                for j, ch in enumerate(p):
                    if ch in "λ01":
                        assert out[i].tryte[j] == ch, (kind, key, i, j)

# --- errores ---

@pytest.mark.parametrize("line, exc", [
    ("mov R0, R1", DestinationMismatch),
    ("nand R0, R1, RZ", DestinationMismatch),
    ("cmp R0 → R1", DestinationMismatch),
    ("jmp L → R0", DestinationMismatch),
    ("mov R0, R1 → R1", WrongOperandCount),
    ("add R0 → R1", WrongOperandCount),
    ("fillz R0, R1, RZ", WrongOperandCount),
    ("jmp", WrongOperandCount),
    ("restart R0", WrongOperandCount),
    ("mov [R0] → [R1]", IllegalOperands),
    ("mov 5 → R0", IllegalOperands),
    ("jmp [R0]", IllegalOperands),
    ("je [L]", IllegalOperands),
    ("add 1, R0 → R1", IllegalOperands),
    ("cmp 5, R0", IllegalOperands),
    ("fillz 5", IllegalOperands),
    ("frob R0", UnknownInstruction),
    ("mov 400 → [R0]", ValueOutOfRange),
    ("mov 0xQ → [R0]", InvalidNumeralLiteral),
])
def test_errores(line, exc):
    with pytest.raises(exc):
        _enc(line)

def test_illegal_operands_message_names_mnemonic_and_operands():
    with pytest.raises(IllegalOperands, match=r"mov \[R0\] → \[R1\]"):
        _enc("mov [R0] → [R1]")

# --- directivas de datos ---

def test_encode_data():
    assert encode_data("tryte", ["14"]) == _r("001λλλ")
    assert encode_data("dp", ["1", "X"]) == _r("000000", "000001") + (AbsoluteRef("X"),)
    assert encode_data("TRIPLE", ["0t1"]) == _r("000000", "000000", "000001")

def test_encode_data_errores():
    with pytest.raises(UnknownInstruction):
        encode_data("word", ["1"])
    with pytest.raises(WrongOperandCount):
        encode_data("tryte", [])
    with pytest.raises(ValueOutOfRange):
        encode_data("tryte", ["400"])
