from __future__ import annotations

from pathlib import Path

from xlsx2resx.cli import main as cli_main
from xlsx2resx.resx.document import read_resx

"""Forward then inverse through the CLI: the triples survive the round trip."""

ROWS = [
    ["identifier", "description", "neutral", "fr", "zh-Hans"],
    ["Cancel", "button", "Cancel", "Annuler", "取消"],
    ["Greeting", "Salutation", "Hello", "Bonjour", ""],
    ["Multi", "", "line one\nline two", "ligne un\nligne deux", ""],
    ["Ok", "", "OK", "", "确定"],
]


def _triples(rows: list[list[str]]) -> set[tuple[str, str, str]]:
    header = rows[0]
    found = set()
    for row in rows[1:]:
        for col, locale in enumerate(header[2:], start=2):
            if row[col]:
                found.add((row[0], locale, row[col]))
    return found


def test_forward_then_inverse(temp_workdir: Path, make_excel, read_sheet):
    src = make_excel(temp_workdir / "data" / "Strings.xlsx", {"Strings": ROWS})
    resx_dir = temp_workdir / "out"
    assert cli_main(["--input", str(src), "--output", str(resx_dir)]) == 0
    assert sorted(p.name for p in resx_dir.iterdir()) == [
        "Strings.fr.resx",
        "Strings.resx",
        "Strings.zh-Hans.resx",
    ]
    assert [d.name for d in read_resx(resx_dir / "Strings.zh-Hans.resx")] == ["Cancel", "Ok"]

    back = temp_workdir / "back"
    back.mkdir()
    assert cli_main(["--invert", "--input", str(resx_dir / "Strings.resx"), "--output", str(back)]) == 0

    rows = read_sheet(back / "Strings.xlsx", "Strings")
    assert rows[0] == ["identifier", "description", "neutral", "fr", "zh-Hans"]
    assert [r[0] for r in rows[1:]] == ["Cancel", "Greeting", "Multi", "Ok"]
    assert [r[1] for r in rows[1:]] == ["button", "Salutation", "", ""]
    assert _triples(rows) == _triples(ROWS)


def test_inverse_then_forward(resx_family: Path, temp_workdir: Path):
    out = temp_workdir / "out"
    assert cli_main(["--invert", "--input", str(resx_family), "--output", str(out)]) == 0

    resx_dir = temp_workdir / "regenerated"
    resx_dir.mkdir()
    assert cli_main(["--input", str(out / "Resources.xlsx"), "--output", str(resx_dir)]) == 0

    neutral = {d.name: (d.value, d.comment) for d in read_resx(resx_dir / "Resources.resx")}
    assert neutral == {
        "A": ("Hello", "greeting"),
        "B": ("World", ""),
        "C": ("MISSING", "WARNING"),
    }
    fr = {d.name: d.value for d in read_resx(resx_dir / "Resources.fr.resx")}
    assert fr == {"A": "Bonjour", "C": "Bonus"}
