from __future__ import annotations

import re
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
APP_DIR = PROJECT_ROOT / "app"
DOMAINS_DIR = APP_DIR / "domains"
COMPONENTS_DIR = APP_DIR / "components"


def _python_files(root: Path) -> list[Path]:
    return sorted(path for path in root.rglob("*.py") if path.is_file())


def test_no_endpoint_decorators_outside_domain_routes() -> None:
    legacy_roots = [APP_DIR / "api" / "v1", COMPONENTS_DIR, APP_DIR / "platform"]
    pattern = re.compile(r"@router\.(?:get|post|put|patch|delete)\(")
    violations = [
        str(path)
        for root in legacy_roots
        for path in _python_files(root)
        if pattern.search(path.read_text(encoding="utf-8"))
    ]
    assert not violations, (
        "Endpoint decorators must only live in domain route files. "
        f"Violations: {violations}"
    )


def test_components_do_not_import_domains() -> None:
    pattern = re.compile(r"(?:from|import)\s+(?:app|\.\.\.)\.?domains\b")
    violations = [
        str(path)
        for path in _python_files(COMPONENTS_DIR)
        if pattern.search(path.read_text(encoding="utf-8"))
    ]
    assert not violations, f"Components must not depend on HTTP domains: {violations}"


def test_domains_do_not_import_other_domain_modules_except_adapters() -> None:
    pattern = re.compile(r"(?:from|import)\s+\.\.([a-zA-Z0-9_]+)\.([a-zA-Z0-9_]+)\b")
    violations: list[str] = []
    for path in _python_files(DOMAINS_DIR):
        current_domain = path.relative_to(DOMAINS_DIR).parts[0]
        for imported_domain, module in pattern.findall(path.read_text(encoding="utf-8")):
            if imported_domain != current_domain and module != "adapters":
                violations.append(f"{path} imports {imported_domain}.{module}")
    assert not violations, f"Cross-domain imports must go through adapters: {violations}"


def test_no_duplicate_endpoint_signatures_across_domains() -> None:
    prefix_re = re.compile(r"APIRouter\([^)]*prefix\s*=\s*['\"]([^'\"]+)['\"]")
    route_re = re.compile(r"@router\.(get|post|put|patch|delete)\(\s*['\"]([^'\"]*)['\"]")

    signatures: dict[str, list[str]] = {}
    for path in _python_files(DOMAINS_DIR):
        content = path.read_text(encoding="utf-8")
        prefix_match = prefix_re.search(content)
        prefix = prefix_match.group(1) if prefix_match else ""
        for method, route_path in route_re.findall(content):
            normalized = re.sub(r"/{2,}", "/", f"{prefix}/{route_path}").rstrip("/") or "/"
            signatures.setdefault(f"{method.upper()} {normalized}", []).append(str(path))

    duplicates = {sig: files for sig, files in signatures.items() if len(files) > 1}
    assert not duplicates, f"Duplicate endpoint signatures detected across domain routers: {duplicates}"


def test_file_size_guard_for_api_and_service_paths() -> None:
    size_limit = 500
    target_files = set(_python_files(APP_DIR / "api" / "v1"))
    target_files.update(APP_DIR.rglob("*service.py"))
    target_files.update(DOMAINS_DIR.rglob("*routes.py"))

    violations: list[str] = []
    for path in sorted(target_files):
        lines = sum(1 for _ in path.open("r", encoding="utf-8"))
        if lines > size_limit:
            violations.append(f"{path.relative_to(PROJECT_ROOT).as_posix()} ({lines} LOC)")

    assert not violations, (
        f"API/service paths must stay <= {size_limit} LOC. "
        f"Violations: {violations}"
    )
