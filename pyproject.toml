[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pietsvg"
version = "0.1.0"
description = "A small 2D drawing API that renders shapes, gradients and images to SVG documents"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["svg", "2d", "graphics", "rendering", "vector", "drawing", "gradient"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pietsvg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
