[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "tradedesk"
version = "0.1.0"
description = "Order books, open orders, positions, scanner formulas and strategy portfolios for a trading desk"
requires-python = ">=3.10"
dependencies = []
keywords = ["trading", "orders", "portfolio", "netbook", "options", "strategy", "scanner"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["tradedesk*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
