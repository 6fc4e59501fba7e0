import pytest

from dekotools.def_document import (
    DefDocument,
    DefError,
    FieldKind,
    FieldType,
)


def test_add_doc_returns_sequential_indices():
    doc = DefDocument()
    assert doc.add_doc("first") == 0
    assert doc.add_doc("second") == 1
    assert doc.doc_strings == ["first", "second"]


def test_set_engine_stores_values():
    doc = DefDocument()
    doc.set_engine("3D", 0xB197, 2)
    assert (doc.engine_name, doc.engine_class, doc.engine_doc) == ("3D", 0xB197, 2)


def test_set_engine_rejects_wide_class():
    doc = DefDocument()
    with pytest.raises(DefError, match="Class ID out of bounds"):
        doc.set_engine("3D", 0x10000, 0)


@pytest.mark.parametrize(
    "factory,kind",
    [
        (FieldType.uint, FieldKind.UINT),
        (FieldType.bool_, FieldKind.BOOL),
        (FieldType.float_, FieldKind.FLOAT),
        (FieldType.pipe, FieldKind.PIPE),
        (FieldType.iova, FieldKind.IOVA),
    ],
)
def test_plain_field_types(factory, kind):
    assert factory() == FieldType(kind, 0)


@pytest.mark.parametrize(
    "factory,kind",
    [(FieldType.enum, FieldKind.ENUM), (FieldType.bits, FieldKind.BITS), (FieldType.array, FieldKind.ARRAY)],
)
def test_body_field_types(factory, kind):
    t = factory(5)
    assert (t.kind, t.body) == (kind, 5)


def test_add_reg_duplicate_raises():
    doc = DefDocument()
    doc.add_reg(0x10, "Foo", 0, 1, FieldType.uint())
    with pytest.raises(DefError, match="Name already in use"):
        doc.add_reg(0x11, "Foo", 0, 1, FieldType.uint())
    assert [f.name for f in doc.fields] == ["Foo"]


def test_registers_inside_array_go_to_body():
    doc = DefDocument()
    doc.add_reg(0x10, "Addr", 0, 1, FieldType.uint())
    doc.push_array()
    doc.add_reg(0, "Addr", 0, 1, FieldType.iova())
    doc.add_reg(2, "Fmt", 0, 1, FieldType.uint())
    body = doc.pop_array()
    assert body == 0
    assert [f.name for f in doc.array_bodies[body]] == ["Addr", "Fmt"]
    assert [f.name for f in doc.fields] == ["Addr"]


def test_duplicate_inside_array_raises():
    doc = DefDocument()
    doc.push_array()
    doc.add_reg(0, "X", 0, 1, FieldType.uint())
    with pytest.raises(DefError):
        doc.add_reg(1, "X", 0, 1, FieldType.uint())


def test_add_array_records_field():
    doc = DefDocument()
    doc.push_array()
    doc.add_reg(0, "A", 0, 1, FieldType.uint())
    body = doc.pop_array()
    doc.add_array(0x100, "Rt", 0, 8, body, 0x10)
    fld = doc.fields[0]
    assert (fld.name, fld.index, fld.array_size, fld.array_next) == ("Rt", 0x100, 8, 0x10)
    assert fld.type == FieldType.array(body)


def test_add_array_duplicate_raises():
    doc = DefDocument()
    doc.add_reg(0, "Rt", 0, 1, FieldType.uint())
    with pytest.raises(DefError, match="Name already in use"):
        doc.add_array(0x100, "Rt", 0, 8, 0, 0x10)


def test_enum_bodies_and_duplicates():
    doc = DefDocument()
    doc.add_enum_field(1, "_A", 0)
    with pytest.raises(DefError, match="Duplicate enum value"):
        doc.add_enum_field(2, "_A", 0)
    first = doc.pop_enum_body()
    doc.add_enum_field(3, "_A", 0)
    second = doc.pop_enum_body()
    assert (first, second) == (0, 1)
    assert [(e.name, e.value) for e in doc.enum_bodies[first]] == [("_A", 1)]
    assert [(e.name, e.value) for e in doc.enum_bodies[second]] == [("_A", 3)]


def test_named_enum_duplicate_raises():
    doc = DefDocument()
    doc.add_enum("Fmt", 0, 0)
    with pytest.raises(DefError, match="Duplicate enum name"):
        doc.add_enum("Fmt", 0, 1)
    assert doc.named_enums["Fmt"].body == 0


def test_bits_bodies_and_duplicates():
    doc = DefDocument()
    doc.add_bits_field((0, 3), "_Lo", 0, FieldType.uint())
    with pytest.raises(DefError, match="Duplicate bitfield"):
        doc.add_bits_field((4, 7), "_Lo", 0, FieldType.uint())
    body = doc.pop_bits_body()
    assert [(b.name, b.bits) for b in doc.bits_bodies[body]] == [("_Lo", (0, 3))]
    assert doc.pop_bits_body() == body + 1
    assert doc.bits_bodies[body + 1] == []