"""
Test __main__ cli entrypoints / functions
"""
from subprocess import PIPE
from subprocess import Popen

PUBKEY = "0260b2003c386519fc9eadf2b5cf124dd8eea4c4e68d5e154050a9346ea98ce600"
SEED = "000102030405060708090a0b0c0d0e0f"
MASTER = "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjqJoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8:xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKmPGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"


def run(args, stdin=None):
    with Popen(["bitdesc"] + args, stdin=PIPE, stdout=PIPE, stderr=PIPE) as proc:
        stdout, stderr = proc.communicate(stdin.encode("utf8") if stdin else None)
        return proc.returncode, stdout.decode("utf8"), stderr.decode("utf8")


def test_help():
    for subcommand in [[], ["derive-key"], ["key-expression"], ["script-expression"]]:
        with Popen(["bitdesc"] + subcommand + ["-h"], stdout=PIPE) as proc:
            proc.communicate()
            assert proc.returncode == 0, "retcode non-zero"


def test_key_expression():
    expr = f"[deadbeef/0h/1h/2]{PUBKEY}"
    returncode, stdout, _ = run(["key-expression", expr])
    assert stdout == f"{expr}\n", "stdout unexpected"
    assert returncode == 0, "retcode non-zero"


def test_key_expression_invalid():
    returncode, stdout, stderr = run(["key-expression", PUBKEY, "[deadbeef]"])
    assert stdout == f"{PUBKEY}\n", "valid input before failure should be printed"
    assert stderr == "Parsing error: Key is empty\n", "stderr unexpected"
    assert returncode == 1, "retcode not 1"


def test_script_expression():
    returncode, stdout, _ = run(
        ["script-expression", "raw(deadbeef)", "--compute-checksum"]
    )
    assert stdout == "raw(deadbeef)#89f8spxm\n", "stdout unexpected"
    assert returncode == 0, "retcode non-zero"

    returncode, stdout, _ = run(
        ["script-expression", "--verify-checksum", "raw(deadbeef)#89f8spxm"]
    )
    assert stdout == "OK: raw(deadbeef)#89f8spxm\n", "stdout unexpected"
    assert returncode == 0, "retcode non-zero"

    returncode, _, stderr = run(
        ["script-expression", "--verify-checksum", "raw(deadbeef)#qqqqqqqq"]
    )
    assert stderr == "Parsing error: checksum verification failed\n"
    assert returncode == 1, "retcode not 1"


def test_script_expression_exclusive_flags():
    returncode, _, _ = run(
        [
            "script-expression",
            "--verify-checksum",
            "--compute-checksum",
            "raw(deadbeef)",
        ]
    )
    assert returncode == 2, "usage error expected"


def test_stdin():
    returncode, stdout, _ = run(
        ["script-expression", "-", "--compute-checksum"],
        stdin="raw(deadbeef)\n\nraw( deadbeef )\n",
    )
    assert stdout == "raw(deadbeef)#89f8spxm\nraw( deadbeef )#985dv2zl\n"
    assert returncode == 0, "retcode non-zero"


def test_derive_key():
    returncode, stdout, _ = run(["derive-key", SEED])
    assert stdout == f"{MASTER}\n", "stdout unexpected"
    assert returncode == 0, "retcode non-zero"

    returncode, stdout, _ = run(["derive-key", "-", "--path", "0h/1"], stdin=SEED)
    assert stdout.startswith("xpub6ASuArnXKPbfEwhqN6e3mwBcDTgzisQN1wXN9BJcM47sSikHjJf3UFHKkNAWbWMiGj7Wf5uMash7SyYq527Hqck2AxYysAA7xmALppuCkwQ:")
    assert returncode == 0, "retcode non-zero"


def test_missing_input():
    returncode, _, _ = run(["key-expression"])
    assert returncode == 2, "usage error expected"
