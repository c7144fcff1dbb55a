from __future__ import annotations

import argparse
from dataclasses import dataclass, field
import json
from pathlib import Path
import subprocess
import sys
import tomllib
from typing import Callable

ROOT_DIR = Path(__file__).resolve().parents[2]
REQUIRED_TEMPLATES = ("widget.html", "onboarding.html", "error.html")

PASS = "PASS"
WARN = "WARN"
FAIL = "FAIL"


@dataclass
class CheckResult:
    name: str
    status: str
    message: str = ""


@dataclass
class Report:
    results: list[CheckResult] = field(default_factory=list)

    def add(self, result: CheckResult) -> None:
        self.results.append(result)
        print(f"[{result.status}] {result.name}")
        if result.message:
            print(f"    -> {result.message}")

    def count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)


def _load_pyproject(root: Path) -> dict | None:
    path = root / "pyproject.toml"
    if not path.exists():
        return None
    with path.open("rb") as handle:
        return tomllib.load(handle)


def check_packaging(root: Path) -> CheckResult:
    try:
        data = _load_pyproject(root)
    except tomllib.TOMLDecodeError as exc:
        return CheckResult("Packaging", FAIL, f"pyproject.toml is not valid TOML: {exc}")
    if data is None:
        return CheckResult("Packaging", FAIL, "pyproject.toml not found")
    backend = (data.get("build-system") or {}).get("build-backend")
    if not backend:
        return CheckResult("Packaging", FAIL, "pyproject.toml has no [build-system] build-backend")
    return CheckResult("Packaging", PASS, backend)


def check_dependencies(root: Path) -> CheckResult:
    try:
        data = _load_pyproject(root) or {}
    except tomllib.TOMLDecodeError:
        return CheckResult("Dependencies", FAIL, "pyproject.toml could not be parsed")
    deps = (data.get("project") or {}).get("dependencies") or []
    if not deps:
        return CheckResult("Dependencies", WARN, "No runtime dependencies declared")
    requires_python = (data.get("project") or {}).get("requires-python")
    suffix = f", requires-python {requires_python}" if requires_python else ""
    return CheckResult("Dependencies", PASS, f"{len(deps)} declared{suffix}")


def check_env_vars(root: Path) -> CheckResult:
    example = root / ".env.example"
    if not example.exists():
        return CheckResult("Environment Variables", PASS, "No .env.example template")
    names = []
    for line in example.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        names.append(line.split("=", 1)[0].strip())
    if not names:
        return CheckResult("Environment Variables", PASS, ".env.example is empty")
    preview = ", ".join(names[:3]) + ("..." if len(names) > 3 else "")
    return CheckResult(
        "Environment Variables",
        WARN,
        f"{len(names)} variable(s) needed; confirm they are set in the deployment: {preview}",
    )


def check_app_entry(root: Path) -> CheckResult:
    entry = root / "notion_calendar" / "main.py"
    if not entry.exists():
        return CheckResult("App Entry", FAIL, "notion_calendar/main.py not found")
    return CheckResult("App Entry", PASS, "notion_calendar.main:app")


def check_templates(root: Path) -> CheckResult:
    templates_dir = root / "notion_calendar" / "templates"
    missing = [name for name in REQUIRED_TEMPLATES if not (templates_dir / name).exists()]
    if missing:
        return CheckResult("Templates", FAIL, f"Missing templates: {', '.join(missing)}")
    return CheckResult("Templates", PASS, f"{len(REQUIRED_TEMPLATES)} templates present")


def check_git(root: Path) -> CheckResult:
    if not (root / ".git").exists():
        return CheckResult("Git", WARN, "Not a git repository")
    try:
        branch = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        ).stdout.strip()
        dirty = subprocess.run(
            ["git", "status", "--porcelain"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        ).stdout.strip()
    except (OSError, subprocess.CalledProcessError) as exc:
        return CheckResult("Git", WARN, f"git command failed: {exc}")
    if dirty:
        return CheckResult("Git", WARN, f"branch {branch} has uncommitted changes")
    return CheckResult("Git", PASS, f"branch {branch}")


CHECKS: dict[str, Callable[[Path], CheckResult]] = {
    "packaging": check_packaging,
    "dependencies": check_dependencies,
    "env": check_env_vars,
    "app": check_app_entry,
    "templates": check_templates,
    "git": check_git,
}


def load_skip_list(root: Path) -> list[str]:
    path = root / ".predeployrc"
    if not path.exists():
        return []
    try:
        config = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        print(f"[WARN] .predeployrc could not be parsed: {exc}")
        return []
    skip = config.get("skipChecks") if isinstance(config, dict) else None
    return [str(name) for name in skip or []]


def run_checks(root: Path = ROOT_DIR) -> Report:
    report = Report()
    skipped = set(load_skip_list(root))
    if skipped:
        print(f"Skipping: {', '.join(sorted(skipped))}")
    for key, check in CHECKS.items():
        if key in skipped:
            continue
        report.add(check(root))
    return report


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Pre-deploy checklist for the calendar widget.")
    parser.add_argument("--root", type=Path, default=ROOT_DIR, help="Project root to inspect")
    args = parser.parse_args(argv)

    print(f"Pre-deploy checks for {args.root}")
    report = run_checks(args.root)
    print(
        f"\nSummary: pass={report.count(PASS)} warn={report.count(WARN)} fail={report.count(FAIL)}"
    )
    if report.count(FAIL):
        print("Fix the failing checks before deploying.")
        return 1
    if report.count(WARN):
        print("Review the warnings before deploying.")
    else:
        print("All checks passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
