[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pubky"
version = "0.1.0"
description = "Pubky homeserver storage and request handling, capabilities, keys, recovery files and client helpers"
requires-python = ">=3.10"
keywords = [
    "pubky",
    "homeserver",
    "capabilities",
    "recovery-file",
    "lmdb",
    "ed25519",
    "blake3",
    "z-base-32",
]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Security :: Cryptography",
    "Topic :: Database",
]
dependencies = [
    "pynacl",
    "cryptography",
    "lmdb",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pubky"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
