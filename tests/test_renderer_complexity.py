# Cyclomatic complexity guard for the report and CLI modules.
# Needs radon (test extra); skipped when it is not installed.
import pathlib
import pytest

try:
    from radon.complexity import cc_visit
except ImportError:
    pytest.skip("radon not installed - complexity test skipped", allow_module_level=True)

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
THRESHOLD = 12


@pytest.mark.parametrize('rel_path', ['report/renderer.py', 'cli.py'])
def test_complexity_threshold(rel_path):
    """Fail if any function in the module exceeds THRESHOLD."""
    path = REPO_ROOT / rel_path
    assert path.exists(), f"{rel_path} not found at {path}"

    blocks = cc_visit(path.read_text(encoding='utf-8'))
    offenders = [(b.name, b.complexity, b.lineno) for b in blocks if b.complexity > THRESHOLD]
    if offenders:
        offenders_str = '\n'.join(f"{name} (complexity={comp}) at line {lineno}" for name, comp, lineno in offenders)
        pytest.fail(f"Complexity threshold exceeded in {rel_path} (threshold={THRESHOLD}):\n{offenders_str}")
