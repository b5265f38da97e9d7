# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402


def pytest_addoption(parser):
    """Add command-line options for pytest."""
    parser.addoption(
        "--make-figures",
        action="store_true",
        default=False,
        help="Save the figures drawn by the plotting tests.",
    )


@pytest.fixture
def make_figures(request):
    return request.config.getoption("--make-figures")
