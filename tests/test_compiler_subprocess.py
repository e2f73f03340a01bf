"""Runs real launcher processes through the Python template."""

import sys
from pathlib import Path

import pytest

from bundler import Bundler, BundleRequest, FailureKind, ProcessRunner, PythonTemplate, scratch_path_for
from fakes import posix_only


pytestmark = posix_only


def make_request(fake_library: Path, tmp_path: Path, modules, scratch_token=None) -> BundleRequest:
    output = tmp_path / "cache" / "bundle.compiled.py"
    return BundleRequest(
        source_root=fake_library,
        output_path=output,
        scratch_script_path=scratch_path_for(output, scratch_token),
        modules=modules,
    )


@pytest.fixture
def bundler() -> Bundler:
    return Bundler(template=PythonTemplate(interpreter=sys.executable))


def test_compiles_through_a_child_process(bundler, fake_library, tmp_path):
    request = make_request(fake_library, tmp_path, ["mysql", "sqlite"])

    result = bundler.compile(request)

    assert result.ok, result
    assert result.artifact_path == request.output_path
    assert request.output_path.read_text().splitlines() == ["// compiled", "mysql", "sqlite"]
    assert not request.scratch_script_path.exists()


def test_reports_the_child_diagnostic(bundler, fake_library, tmp_path):
    request = make_request(fake_library, tmp_path, ["broken"])

    result = bundler.compile(request)

    assert result.kind == FailureKind.COMPILE
    assert result.diagnostic == "boom: missing class Foo"
    assert request.scratch_script_path.exists()


def test_unexpected_exit_is_a_protocol_violation(bundler, fake_library, tmp_path):
    result = bundler.compile(make_request(fake_library, tmp_path, ["exit"]))

    assert result.kind == FailureKind.PROTOCOL
    assert result.exit_code == 3


def test_hung_child_times_out(fake_library, tmp_path):
    bundler = Bundler(template=PythonTemplate(interpreter=sys.executable), timeout=0.5)

    result = bundler.compile(make_request(fake_library, tmp_path, ["slow"]))

    assert result.kind == FailureKind.TIMEOUT


def test_hostile_module_name_reaches_the_library_verbatim(bundler, fake_library, tmp_path):
    hostile = "x'); import os; os._exit(7) #"
    request = make_request(fake_library, tmp_path, [hostile])

    result = bundler.compile(request)

    assert result.ok, result
    assert request.output_path.read_text().splitlines()[1] == hostile


def test_independent_compiles_with_distinct_scratch_paths(bundler, fake_library, tmp_path):
    first = make_request(fake_library, tmp_path, ["mysql"], scratch_token="one")
    second = make_request(fake_library, tmp_path, ["mysql"], scratch_token="two")
    assert first.scratch_script_path != second.scratch_script_path

    assert bundler.compile(first).ok
    artifact = first.output_path.read_text()
    assert bundler.compile(second).ok

    assert second.output_path.read_text() == artifact
    assert not first.scratch_script_path.exists()
    assert not second.scratch_script_path.exists()
    assert sorted(p.name for p in first.output_path.parent.iterdir()) == ["bundle.compiled.py"]


def test_process_runner_never_raises_on_failure(tmp_path):
    script = tmp_path / "fail.py"
    script.write_text(f"#!{sys.executable}\nprint('first')\nprint('second')\nraise SystemExit(5)\n")
    script.chmod(0o755)

    output = ProcessRunner().run(script)

    assert output.exit_code == 5
    assert output.lines == ["first", "second"]
    assert not output.timed_out


def test_undecodable_child_output_is_replaced(tmp_path):
    script = tmp_path / "latin1.py"
    script.write_text(f"#!{sys.executable}\nimport sys\nsys.stdout.buffer.write(b'erreur \\xe9\\n')\nsys.exit(0)\n")
    script.chmod(0o755)

    output = ProcessRunner().run(script)

    assert output.exit_code == 0
    assert output.lines == ["erreur \ufffd"]


def test_undecodable_diagnostic_still_yields_a_failure(fake_library, tmp_path):
    (fake_library / "bundle_compiler.py").write_text(
        "import sys\n"
        "\n"
        "\n"
        "def compile(output_path, modules):\n"
        "    sys.stdout.flush()\n"
        "    sys.stdout.buffer.write(b'erreur \\xe9\\n')\n"
        "    sys.stdout.buffer.flush()\n"
        "    sys.exit(0)\n"
    )
    bundler = Bundler(template=PythonTemplate(interpreter=sys.executable))

    result = bundler.compile(make_request(fake_library, tmp_path, ["mysql"]))

    assert not result.ok
    assert result.kind == FailureKind.COMPILE
    assert result.diagnostic == "erreur \ufffd"
