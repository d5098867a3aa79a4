[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "staffdesk"
version = "1.0.0"
description = "Staff side of a customer service desk: question statistics, consultation records, manual takeover and live chat session handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["customer service", "chat", "helpdesk", "statistics", "consultation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Chinese (Simplified)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
staffdesk = "staffdesk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["staffdesk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
