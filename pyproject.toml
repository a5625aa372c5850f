[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pctx"
version = "0.1.3"
description = "Generate LLM-ready context from your codebase"
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "ai", "context", "codebase", "agent"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pctx"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
