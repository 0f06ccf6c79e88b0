[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sectorfs"
version = "0.1.0"
description = "A small sector-based file system with block devices, partitions, inodes and directories, plus simulated PC devices"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "filesystem",
    "block-device",
    "inode",
    "partition",
    "ustar",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sectorfs-insult = "sectorfs.insult:main"

[tool.hatch.build.targets.wheel]
packages = ["sectorfs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
