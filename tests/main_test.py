import io
import os
import subprocess
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from tinylambda.main import DEFAULT_RECURSION_LIMIT, main, parse_args


ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def run_tinylambda(line, timeout, encoding="utf-8"):
    """Runs the interpreter in a fresh process with line on standard input, encoded as UTF-8. encoding is what the
    process is told its standard streams use.
    """
    env = dict(os.environ, PYTHONIOENCODING=encoding, PYTHONPATH=ROOT)
    return subprocess.run([sys.executable, "-m", "tinylambda.main"], input=line.encode("utf-8"),
                          stdout=subprocess.PIPE, stderr=subprocess.PIPE, cwd=ROOT, env=env, timeout=timeout)


class ArgsTestCase(unittest.TestCase):

    def test_parse_args(self):
        args = parse_args([])
        self.assertIsNone(args.file)
        self.assertEqual(DEFAULT_RECURSION_LIMIT, args.recursion_limit)

        args = parse_args(["term.lc", "--recursion-limit", "500"])
        self.assertEqual("term.lc", args.file)
        self.assertEqual(500, args.recursion_limit)

        with redirect_stderr(io.StringIO()):
            self.assertRaises(SystemExit, parse_args, ["--recursion-limit", "10"])


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.recursion_limit = sys.getrecursionlimit()

    def tearDown(self):
        sys.setrecursionlimit(self.recursion_limit)

    def test_stdin(self):
        stdout = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO("((λ f. (λ x. (f x))) (λ y. y))\n")), redirect_stdout(stdout):
            main([])
        self.assertEqual("(λ x. x)\n", stdout.getvalue())

    def test_file(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "term.lc")
            with open(path, "w", encoding="utf-8") as file:
                file.write("(λ f. (λ x. (f (f x))))\n")

            stdout = io.StringIO()
            with redirect_stdout(stdout):
                main([path])
        self.assertEqual("(λ x. (λ xx. (x (x xx))))\n", stdout.getvalue())

    def test_failures_exit(self):
        cases = ["(λ x. x\n", "(a a)\n", ""]
        for case in cases:
            with mock.patch("sys.stdin", io.StringIO(case)), redirect_stdout(io.StringIO()) as stdout, \
                    redirect_stderr(io.StringIO()) as stderr, self.assertRaises(SystemExit) as context:
                main([])
            self.assertEqual(1, context.exception.code, case)
            self.assertEqual("", stdout.getvalue(), case)
            self.assertIn("error", stderr.getvalue(), case)

    def test_missing_file(self):
        with redirect_stderr(io.StringIO()) as stderr, self.assertRaises(SystemExit) as context:
            main([os.path.join(tempfile.gettempdir(), "tinylambda-missing", "term.lc")])
        self.assertEqual(1, context.exception.code)
        self.assertIn("could not be opened", stderr.getvalue())


class ProcessTestCase(unittest.TestCase):

    def test_normal_form(self):
        result = run_tinylambda("((λ f. (λ x. (f x))) (λ y. (λ x. y)))\n", timeout=60)
        self.assertEqual(0, result.returncode)
        self.assertEqual("(λ x. (λ xx. x))\n", result.stdout.decode("utf-8"))

    def test_streams_are_utf8(self):
        should_pass = ["latin-1", "ascii", "utf-8"]
        for encoding in should_pass:
            result = run_tinylambda("((λ y. y) (λ x. x))\n", timeout=60, encoding=encoding)
            self.assertEqual(0, result.returncode, encoding)
            self.assertEqual("(λ x. x)\n", result.stdout.decode("utf-8"), encoding)

    def test_unbound_variable(self):
        result = run_tinylambda("(a a)\n", timeout=60)
        self.assertEqual(1, result.returncode)
        self.assertEqual(b"", result.stdout)

    def test_divergence(self):
        # Ω has no normal form: the interpreter must still be running when the bound expires
        self.assertRaises(subprocess.TimeoutExpired, run_tinylambda, "((λ x. (x x)) (λ x. (x x)))\n", timeout=3)


if __name__ == '__main__':
    unittest.main()
