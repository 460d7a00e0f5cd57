import io
import json
from pathlib import Path

import pytest

from scripts.run_manifest_check import main

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures" / "manifests"


@pytest.fixture(autouse=True)
def _no_local_config(monkeypatch, tmp_path):
    # Keep a stray .kubecheck.yaml in the working directory out of the run.
    monkeypatch.chdir(tmp_path)


def _run(argv, stdin_text=None):
    out, err = io.StringIO(), io.StringIO()
    stdin = io.StringIO(stdin_text) if stdin_text is not None else None
    code = main(argv, stdin=stdin, stdout=out, stderr=err)
    return code, out.getvalue(), err.getvalue()


def test_missing_target_is_a_usage_error():
    code, out, err = _run([])
    assert code == 2
    assert "required" in err
    assert out == ""


def test_nonexistent_target():
    code, _, err = _run(["does-not-exist.yaml"])
    assert code == 2
    assert "Error processing input" in err


def test_single_file_with_errors():
    code, out, _ = _run([str(FIXTURES / "deployment-bad.yaml")])
    assert code == 2
    assert "Deployment: web" in out
    assert "Container 'nginx' uses 'latest' image tag" in out
    assert "help: use a specific version or digest" in out
    assert "[ 2 errors | 2 warns ]" in out
    assert "4 violations found." in out
    # Errors are listed before warnings.
    assert out.index("running as root") < out.index("missing resource requests")


def test_single_clean_file():
    code, out, _ = _run([str(FIXTURES / "pod-good.yml")])
    assert code == 0
    assert "All checks passed" in out
    assert "0 violations found." in out
    box = [line for line in out.splitlines() if line.strip()[:1] in ("┌", "└")]
    assert len(box) == 2
    assert box[0].endswith("┐") and box[1].endswith("┘")
    assert len(box[0]) == len(box[1])


def test_directory_mode_summary():
    code, out, _ = _run([str(FIXTURES)])
    assert code == 2
    assert "Scanning directory" in out
    assert "2 ERR" in out
    assert "broken.yaml could not be parsed" in out
    assert "Status  ➔ FAILED Exit code: 2" in out
    assert "PASSED\n" not in out.split("Summary")[0]


def test_directory_mode_verbose_lists_passing_documents():
    code, out, _ = _run(["-v", str(FIXTURES)])
    assert code == 2
    assert "PASSED" in out
    assert "Resource: Pod/api" in out


def test_stdin_json_output():
    manifest = "kind: Pod\nmetadata: {name: p}\nspec:\n  containers:\n    - {name: c, image: 'c:1'}\n"
    code, out, _ = _run(["--format", "json", "-"], stdin_text=manifest)
    data = json.loads(out)
    assert code == 2
    assert data["severity"] == "ERROR"
    assert data["exit_code"] == 2
    (doc,) = data["documents"]
    assert doc["source"] == "<stdin>"
    assert [v["rule"] for v in doc["violations"]] == [
        "require-resource-requests",
        "require-resource-limits",
        "no-root-containers",
    ]


def test_custom_config_and_markdown(tmp_path):
    cfg = tmp_path / "rules.yaml"
    cfg.write_text(
        "rules:\n"
        "  - name: has-limits\n"
        "    severity: WARN\n"
        "    conditions: [missing_cpu_limits]\n"
        "    message: \"{container} lacks a cpu limit\"\n"
    )
    code, out, _ = _run(["--config", str(cfg), "--format", "markdown", str(FIXTURES / "deployment-bad.yaml")])
    assert code == 1
    assert "# Manifest Check" in out
    assert "- WARN `has-limits`: nginx lacks a cpu limit" in out


def test_invalid_config_is_fatal(tmp_path):
    cfg = tmp_path / "rules.yaml"
    cfg.write_text("rules: [unclosed")
    code, _, err = _run(["--config", str(cfg), str(FIXTURES / "pod-good.yml")])
    assert code == 2
    assert "Error loading rules" in err


def test_workers_must_be_positive():
    code, _, err = _run(["--workers", "0", str(FIXTURES)])
    assert code == 2
    assert "--workers" in err


def test_bad_helm_timeout_is_reported(monkeypatch):
    monkeypatch.setenv("KUBECHECK_HELM_TIMEOUT", "soon")
    code, out, err = _run([str(FIXTURES / "pod-good.yml")])
    assert code == 2
    assert "Error loading helm config" in err
    assert out == ""


def test_review_failures_are_not_reported_as_input_errors(monkeypatch):
    import scripts.run_manifest_check as cli_module

    def _broken_review(*args, **kwargs):
        raise ValueError("rule evaluation bug")

    monkeypatch.setattr(cli_module, "review_files", _broken_review)
    with pytest.raises(ValueError, match="rule evaluation bug"):
        _run([str(FIXTURES / "pod-good.yml")])
