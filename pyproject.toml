[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "atlasopt"
version = "0.1.0"
description = "Command-line tool that configures Rust projects for faster builds and wraps everyday cargo work"
requires-python = ">=3.11"
keywords = ["rust", "cargo", "build", "optimization", "performance", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "rich>=13.0",
    "platformdirs>=3.0",
    "tomli-w>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
atlasopt = "atlasopt.cli:main"
atlas = "atlasopt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["atlasopt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
