[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dodo-config"
version = "0.10.0"
description = "Load, template and validate YAML backdrop configurations for containerised development environments"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["dodo", "backdrop", "container", "configuration", "yaml", "template"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dodo-config = "dodo_config.command:main"

[tool.hatch.build.targets.wheel]
packages = ["dodo_config"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
