# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import pytest

from errorcontrol.__main__ import main


def test_compare_prints_markdown_table(capsys):
    assert main(["compare", "--size", "40", "--seed", "0"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines()[0].startswith("| method")
    for name in ("inverse power", "RQI", "PGD", "LOPCG"):
        assert name in out


def test_compare_block_with_plot(tmp_path, capsys):
    path = tmp_path / "residuals.png"
    argv = ["compare", "--block", "--size", "40", "--gap", "1", "--gap", "5"]
    assert main(argv + ["--seed", "1", "--plot", str(path)]) == 0
    out = capsys.readouterr().out
    assert "lambda_2" in out
    assert "SciPy LOBPCG" in out
    assert path.exists()


def test_compare_requires_subcommand():
    with pytest.raises(SystemExit):
        main([])


def test_compare_block_small_problem(capsys):
    # SciPy's LOBPCG falls back to a dense solver below five times the block size
    assert main(["compare", "--block", "--size", "9", "--seed", "0"]) == 0
    out = capsys.readouterr().out
    assert "SciPy LOBPCG" in out
