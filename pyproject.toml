[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asmsim"
version = "0.1.0"
description = "Two-pass assembler and object code simulator for a small teaching machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "simulator", "two-pass", "symbol table", "intermediate code"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Assemblers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
asmsim-assemble = "asmsim.assembler:main"
asmsim-run = "asmsim.console:main"

[tool.hatch.build.targets.wheel]
packages = ["asmsim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
