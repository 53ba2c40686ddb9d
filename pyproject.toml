[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "resume_aligner"
version = "0.1.0"
description = "Resume and job description alignment: section detection, ATS keyword matching and embedding similarity"
requires-python = ">=3.10"
dependencies = []
keywords = ["resume", "ats", "nlp", "job-search", "alignment", "embeddings"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["resume_aligner"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
