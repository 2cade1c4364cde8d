[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ethashpow"
version = "0.4.3"
description = "Pure-Python Ethash and ProgPoW proof-of-work hashing, verification and nonce search"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = ["ethash", "progpow", "keccak", "kiss99", "proof-of-work", "hashing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ethashpow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
