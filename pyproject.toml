[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evshell"
version = "0.1.0"
description = "A small embeddable command shell with variables, command substitution and a line editor"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "cli", "interpreter", "terminal", "embedded"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
evshell = "evshell.syscli:main"

[tool.hatch.build.targets.wheel]
packages = ["evshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
