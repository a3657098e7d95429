[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netanalyzer"
version = "2.0.0"
description = "Parallel ICMP/TCP host discovery and device identification for local networks"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["network", "scanner", "ping", "icmp", "tcp", "subnet", "discovery"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
network-analyzer = "netanalyzer.cli:main"
network-scanner = "netanalyzer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["netanalyzer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
