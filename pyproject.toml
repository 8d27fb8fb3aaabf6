[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ymlfeed"
version = "0.1.0"
description = "HTTP service that publishes a dance school's classes and passes as a YML product feed"
requires-python = ">=3.10"
keywords = ["yml", "feed", "catalog", "xml", "mysql"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "pymysql",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
ymlfeed = "ymlfeed.server:main"

[tool.hatch.build.targets.wheel]
packages = ["ymlfeed"]

[tool.pytest.ini_options]
addopts = "-ra"
