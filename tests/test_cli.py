"""CLI parser and entrypoint tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from symdoc.cli import _build_parser, main


def _write_model(root: Path) -> Path:
    model = {
        "types": {
            "Foo": {"kind": "class", "locations": [{"filename": f"{root}/src/foo.cr", "line": 1}]},
            "Vendored": {"kind": "class", "locations": [{"filename": f"{root}/lib/v.cr", "line": 1}]},
        }
    }
    path = root / "model.json"
    path.write_text(json.dumps(model), encoding="utf-8")
    return path


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate", "model.json"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "model.json", "--verbose"])
    assert args.verbose is True
    assert args.model == "model.json"


def test_cli_collects_repeated_include_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "model.json", "--include", "src", "--include", "ext"])
    assert args.include == ["src", "ext"]
    assert args.no_repository is False


def test_cli_generate_writes_site(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    root = tmp_path.resolve()
    model = _write_model(root)
    output = root / "out"

    main(["generate", str(model), "--project-root", str(root), "--output", str(output), "--no-repository"])

    assert (output / "Foo.html").exists()
    assert not (output / "Vendored.html").exists()
    assert "Documented 1 top-level entries" in capsys.readouterr().out


def test_cli_include_flag_overrides_config(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    model = _write_model(root)
    output = root / "out"

    main(
        [
            "generate",
            str(model),
            "--project-root",
            str(root),
            "--output",
            str(output),
            "--include",
            "lib",
            "--no-repository",
        ]
    )

    assert (output / "Vendored.html").exists()
    assert not (output / "Foo.html").exists()


def test_cli_reports_invalid_model(tmp_path: Path) -> None:
    model = tmp_path / "model.json"
    model.write_text("[]", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(model), "--project-root", str(tmp_path), "--no-repository"])
    assert excinfo.value.code == 1


def test_cli_reports_invalid_config(tmp_path: Path) -> None:
    model = _write_model(tmp_path.resolve())
    (tmp_path / ".symdoc.yml").write_text("- nope\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(model), "--project-root", str(tmp_path)])
    assert excinfo.value.code == 1


def test_cli_reports_unwritable_output(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    model = _write_model(root)
    blocker = root / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "generate",
                str(model),
                "--project-root",
                str(root),
                "--output",
                str(blocker / "doc"),
                "--no-repository",
            ]
        )
    assert excinfo.value.code == 1
