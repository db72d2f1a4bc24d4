[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "l10nkit"
version = "0.5.0"
description = "Localization utilities for ASGI web applications: language detection, locale sub-path redirects and Fluent message formatting"
requires-python = ">=3.10"
keywords = ["localization", "i18n", "l10n", "asgi", "fluent", "accept-language"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Localization",
]
dependencies = [
    "markupsafe",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["l10nkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
