[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kagimcp"
version = "0.0.25"
description = "Model Context Protocol server and async client for the Kagi Search, Summarizer, FastGPT and Enrichment APIs"
requires-python = ">=3.10"
keywords = ["kagi", "mcp", "ai", "search", "summarizer", "fastgpt", "json-rpc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
]
dependencies = [
    "httpx>=0.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[project.scripts]
kagi-mcp-server = "kagimcp.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kagimcp"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
