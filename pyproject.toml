[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "otodecks"
version = "0.1.0"
description = "A two-deck DJ mixer model with a playlist, fades, waveform overviews and VU metering"
requires-python = ">=3.10"
keywords = ["dj", "audio", "mixer", "playlist", "waveform", "vu-meter", "wav"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
otodecks = "otodecks.app:main"

[tool.hatch.build.targets.wheel]
packages = ["otodecks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
