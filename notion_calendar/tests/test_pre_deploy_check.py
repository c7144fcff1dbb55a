import json
from pathlib import Path

from notion_calendar.scripts.pre_deploy_check import (
    FAIL,
    PASS,
    WARN,
    check_app_entry,
    check_dependencies,
    check_env_vars,
    check_packaging,
    check_templates,
    main,
    run_checks,
)


def _make_project(root: Path) -> Path:
    (root / "pyproject.toml").write_text(
        '[build-system]\nbuild-backend = "setuptools.build_meta"\n\n'
        '[project]\nname = "x"\nrequires-python = ">=3.11"\ndependencies = ["fastapi"]\n',
        encoding="utf-8",
    )
    templates = root / "notion_calendar" / "templates"
    templates.mkdir(parents=True)
    for name in ("widget.html", "onboarding.html", "error.html"):
        (templates / name).write_text("<html></html>", encoding="utf-8")
    (root / "notion_calendar" / "main.py").write_text("app = None\n", encoding="utf-8")
    return root


def test_checks_pass_for_complete_project(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    assert check_packaging(root).status == PASS
    assert check_dependencies(root).status == PASS
    assert check_app_entry(root).status == PASS
    assert check_templates(root).status == PASS
    assert check_env_vars(root).status == PASS


def test_missing_pyproject_fails(tmp_path: Path) -> None:
    assert check_packaging(tmp_path).status == FAIL
    assert check_app_entry(tmp_path).status == FAIL


def test_invalid_toml_fails(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[build-system\n", encoding="utf-8")
    assert check_packaging(tmp_path).status == FAIL


def test_env_example_produces_warning(tmp_path: Path) -> None:
    (tmp_path / ".env.example").write_text("# comment\nPUBLIC_BASE_URL=\nLOG_LEVEL=INFO\n", encoding="utf-8")
    result = check_env_vars(tmp_path)
    assert result.status == WARN
    assert "PUBLIC_BASE_URL" in result.message


def test_missing_template_fails(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    (root / "notion_calendar" / "templates" / "widget.html").unlink()
    result = check_templates(root)
    assert result.status == FAIL
    assert "widget.html" in result.message


def test_predeployrc_skips_checks(tmp_path: Path) -> None:
    root = _make_project(tmp_path)
    (root / ".predeployrc").write_text(json.dumps({"skipChecks": ["git", "env"]}), encoding="utf-8")
    report = run_checks(root)
    names = [result.name for result in report.results]
    assert "Git" not in names
    assert "Environment Variables" not in names
    assert report.count(FAIL) == 0


def test_main_exit_codes(tmp_path: Path) -> None:
    assert main(["--root", str(tmp_path)]) == 1
    root = _make_project(tmp_path)
    (root / ".predeployrc").write_text(json.dumps({"skipChecks": ["git"]}), encoding="utf-8")
    assert main(["--root", str(root)]) == 0
