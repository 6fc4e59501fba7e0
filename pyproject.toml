[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dekotools"
version = "1.0.0"
description = "Encoders and header generation for Maxwell MME macros, and code generation from engine register definitions"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "mme", "macro", "gpu", "registers", "code-generation"]
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
    "Topic :: Software Development :: Assemblers",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dekotools"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
