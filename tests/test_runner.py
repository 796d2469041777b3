import io
import subprocess
import sys

import pytest

from ctlptl.runner import FakeCmdRunner, IOStreams, RealCmdRunner


def test_real_run_io_writes_stdout_to_stream():
    out = io.StringIO()
    RealCmdRunner().run_io(IOStreams(out=out), sys.executable, "-c", "print('hello')")
    assert out.getvalue().strip() == "hello"


def test_real_run_io_writes_stderr_to_stream():
    err = io.StringIO()
    RealCmdRunner().run_io(
        IOStreams(err_out=err), sys.executable, "-c", "import sys; sys.stderr.write('oops')"
    )
    assert err.getvalue() == "oops"


def test_real_run_io_feeds_string_input():
    out = io.StringIO()
    RealCmdRunner().run_io(
        IOStreams(stdin="abc", out=out),
        sys.executable, "-c", "import sys; print(sys.stdin.read().upper())",
    )
    assert out.getvalue().strip() == "ABC"


def test_real_run_io_reads_file_like_input_into_binary_output():
    out = io.BytesIO()
    RealCmdRunner().run_io(
        IOStreams(stdin=io.StringIO("xyz"), out=out),
        sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())",
    )
    assert out.getvalue() == b"xyz"


def test_real_run_io_raises_on_failure():
    with pytest.raises(subprocess.CalledProcessError) as info:
        RealCmdRunner().run_io(IOStreams(), sys.executable, "-c", "raise SystemExit(3)")
    assert info.value.returncode == 3


def test_real_run_raises_with_stderr():
    with pytest.raises(subprocess.CalledProcessError) as info:
        RealCmdRunner().run(sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(1)")
    assert info.value.stderr == b"bad"


def test_fake_run_records_args():
    seen = []
    runner = FakeCmdRunner(lambda argv: seen.append(argv) or "")
    runner.run("minikube", "delete", "-p", "minikube")
    assert runner.last_args == ["minikube", "delete", "-p", "minikube"]
    assert seen == [["minikube", "delete", "-p", "minikube"]]


def test_fake_run_io_writes_handler_output():
    runner = FakeCmdRunner(lambda argv: '{"minikubeVersion":"v1.25.2"}' if argv[1] == "version" else "")
    out = io.StringIO()
    runner.run_io(IOStreams(out=out), "minikube", "version", "-o", "json")
    assert out.getvalue() == '{"minikubeVersion":"v1.25.2"}'
    assert runner.last_args == ["minikube", "version", "-o", "json"]


def test_fake_run_io_keeps_only_last_args():
    runner = FakeCmdRunner(lambda argv: "")
    runner.run_io(IOStreams(), "a", "1")
    runner.run_io(IOStreams(), "b", "2")
    assert runner.last_args == ["b", "2"]