from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from xlsx2resx.errors import MalformedDocument, WriteFailed
from xlsx2resx.models.conversion_result import Direction
from xlsx2resx.resx.document import ResxData, read_resx, serialize_resx
from xlsx2resx.services.forward import convert_workbook
from xlsx2resx.services.inverse import build_resource_set, invert_documents, to_tabular


def _items(**values: str) -> list[ResxData]:
    return [ResxData(k, v) for k, v in values.items()]


def test_build_resource_set_scenario():
    resources, warnings = build_resource_set(
        "Resources",
        _items(A="Hello", B="World"),
        [("fr", _items(A="Bonjour", C="Bonus"))],
    )
    assert resources.ordered_keys == ["A", "B", "C"]
    assert resources.locale_codes == ["fr"]
    assert resources.entries["A"].neutral_value == "Hello"
    assert resources.entries["A"].translations == {"fr": "Bonjour"}
    assert resources.entries["B"].translations == {}
    c = resources.entries["C"]
    assert (c.neutral_value, c.comment, c.translations) == ("MISSING", "WARNING", {"fr": "Bonus"})
    assert warnings == ["C does not exist in neutral language"]


def test_key_union_is_sorted_and_deduplicated():
    canonical = _items(m="1", a="2", a2="3")
    variants = [
        ("de", _items(z="x", a="y")),
        ("se", _items(b="x", m="y", z="w")),
    ]
    resources, warnings = build_resource_set("R", canonical, variants)
    expected = sorted({"m", "a", "a2"} | {"z", "a"} | {"b", "m", "z"})
    assert resources.ordered_keys == expected
    assert set(resources.entries) == set(expected)
    # z は 2 つのロケールに出るが警告は最初の 1 回のみ
    assert len(warnings) == 2


def test_to_tabular_layout_and_empty_cells():
    resources, _ = build_resource_set(
        "Resources",
        [ResxData("A", "Hello", "greeting"), ResxData("B", "World")],
        [("fr", _items(A="Bonjour", C="Bonus")), ("se", [])],
    )
    model = to_tabular(resources)
    assert model.header_row() == ["identifier", "description", "neutral", "fr", "se"]
    assert model.rows() == [
        ["A", "greeting", "Hello", "Bonjour", ""],
        ["B", "", "World", "", ""],
        ["C", "WARNING", "MISSING", "Bonus", ""],
    ]


def test_no_locale_files_yields_neutral_only():
    model = to_tabular(build_resource_set("R", _items(A="a"), [])[0])
    assert model.header_row() == ["identifier", "description", "neutral"]
    assert model.rows() == [["A", "", "a"]]


def test_invert_documents_scenario(resx_family: Path, temp_workdir: Path, read_sheet):
    out = temp_workdir / "out"
    result = invert_documents(resx_family, out)

    target = out / "Resources.xlsx"
    assert result.direction is Direction.INVERSE
    assert result.files_written == 1
    assert result.outputs[0].path == target
    assert result.outputs[0].entries == 3
    assert result.warnings == ["C does not exist in neutral language"]
    assert read_sheet(target, "Resources") == [
        ["identifier", "description", "neutral", "fr"],
        ["A", "greeting", "Hello", "Bonjour"],
        ["B", "", "World", ""],
        ["C", "WARNING", "MISSING", "Bonus"],
    ]


def test_zero_row_canonical_yields_header_only(temp_workdir: Path, read_sheet):
    canonical = temp_workdir / "data" / "Empty.resx"
    canonical.write_bytes(serialize_resx([]))
    invert_documents(canonical, temp_workdir / "out")
    assert read_sheet(temp_workdir / "out" / "Empty.xlsx", "Empty") == [
        ["identifier", "description", "neutral"]
    ]


def test_rerun_is_byte_identical(resx_family: Path, temp_workdir: Path):
    out = temp_workdir / "out"
    invert_documents(resx_family, out)
    first = (out / "Resources.xlsx").read_bytes()
    invert_documents(resx_family, out)
    assert (out / "Resources.xlsx").read_bytes() == first

    # zip エントリ時刻と文書プロパティは実行時刻に依存しない
    with zipfile.ZipFile(out / "Resources.xlsx") as archive:
        assert {info.date_time for info in archive.infolist()} == {(1980, 1, 1, 0, 0, 0)}
        assert b"2000-01-01T00:00:00Z" in archive.read("docProps/core.xml")


def test_spreadsheet_sensitive_values_survive_round_trip(temp_workdir: Path):
    resx_dir = temp_workdir / "data" / "Resx"
    resx_dir.mkdir()
    canonical = resx_dir / "R.resx"
    canonical.write_bytes(
        serialize_resx(
            [
                ResxData("K", "=== Title ===", "c"),
                ResxData("Num", "007", "=note"),
                ResxData("Plus", "+1", ""),
                ResxData("At", "@user", ""),
                ResxData("Err", "#N/A", ""),
            ]
        )
    )
    (resx_dir / "R.fr.resx").write_bytes(serialize_resx([ResxData("K", "=SUM(A1)")]))

    out = temp_workdir / "out"
    invert_documents(canonical, out)
    back = temp_workdir / "back"
    back.mkdir()
    convert_workbook(out / "R.xlsx", back)

    assert read_resx(back / "R.resx") == [
        ResxData("At", "@user", ""),
        ResxData("Err", "#N/A", ""),
        ResxData("K", "=== Title ===", "c"),
        ResxData("Num", "007", "=note"),
        ResxData("Plus", "+1", ""),
    ]
    assert read_resx(back / "R.fr.resx") == [ResxData("K", "=SUM(A1)", "c")]


def test_malformed_locale_file_aborts_everything(resx_family: Path, temp_workdir: Path):
    (resx_family.parent / "Resources.de.resx").write_text("<root><data name=", encoding="utf-8")
    with pytest.raises(MalformedDocument):
        invert_documents(resx_family, temp_workdir / "out")
    assert not (temp_workdir / "out" / "Resources.xlsx").exists()


def test_malformed_canonical_aborts(temp_workdir: Path):
    canonical = temp_workdir / "data" / "Bad.resx"
    canonical.write_text("not xml", encoding="utf-8")
    with pytest.raises(MalformedDocument):
        invert_documents(canonical, temp_workdir / "out")


def test_write_failure_is_fatal(resx_family: Path, temp_workdir: Path):
    with pytest.raises(WriteFailed):
        invert_documents(resx_family, temp_workdir / "missing-out")
