[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ibkit"
version = "0.1.0"
description = "Mach-O analysis report helpers: method-chain and symbol-wrapper databases, reflection call reports, header detection and scanner state"
requires-python = ">=3.10"
dependencies = []
keywords = ["mach-o", "objective-c", "reverse-engineering", "disassembly", "static-analysis"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Disassemblers",
    "Topic :: Security",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ibkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
