[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trackmon"
version = "0.1.0"
description = "Monitor and log status messages from a PCI video tracker through its shared-memory mailboxes"
requires-python = ">=3.10"
dependencies = []
keywords = ["tracker", "video tracking", "pci", "telemetry", "csv", "monitoring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
trackmon = "trackmon.gui:main"

[tool.hatch.build.targets.wheel]
packages = ["trackmon"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
