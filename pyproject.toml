[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "cyfcloud"
version = "0.1.0"
description = "Storage layer for a personal blog server: accounts, posts, tags, a resource index and progress projects in SQLite, view and like counters in Redis"
requires-python = ">=3.10"
dependencies = [
    "redis",
]
keywords = ["blog", "sqlite", "redis", "posts", "accounts", "tags"]
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
    "Topic :: Database",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools]
packages = ["cyfcloud"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
