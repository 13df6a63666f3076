[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "notely"
version = "0.1.0"
description = "A small JSON HTTP service for users and their notes, authenticated by API key"
requires-python = ">=3.10"
keywords = ["notes", "api", "http", "flask", "sqlite", "api-key"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
notely = "notely.server:main"

[tool.hatch.build.targets.wheel]
packages = ["notely"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
