from src.terasm.diagnostics import error, warning, AssemblyError, IllegalOperands, UndefinedLabel

def test_error_str():
    d = error("valor fuera de rango", line=12, file="prog.asm", hint="use un tryte")
    s = str(d)
    assert "prog.asm:12:" in s
    assert "ERROR: valor fuera de rango" in s
    assert "(pista: use un tryte)" in s

def test_warning_str_sin_ubicacion():
    assert str(warning("etiqueta redefinida")) == "ADVERTENCIA: etiqueta redefinida"

def test_assembly_error_at_completa_ubicacion():
    exc = IllegalOperands("<mov [R0] → [R1]> no permitido")
    assert exc.line is None
    assert exc.at(7, "p.asm") is exc
    assert exc.line == 7 and exc.file == "p.asm"
    assert str(exc) == "p.asm:7: ERROR: <mov [R0] → [R1]> no permitido"
    assert exc.kind == "IllegalOperands"
    assert isinstance(exc, AssemblyError)

def test_at_no_pisa_linea_existente():
    exc = UndefinedLabel("Etiqueta no definida: x", line=3)
    exc.at(9)
    assert exc.line == 3
    assert exc.diagnostic.severity == "error"
