[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mimzy"
version = "0.1.0"
description = "Ray-triangle intersection with BVH and k-d tree acceleration structures"
requires-python = ">=3.10"
dependencies = []
keywords = ["ray tracing", "bvh", "kd-tree", "acceleration structure", "triangle", "rendering"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
mimzy = "mimzy.render:main"

[tool.hatch.build.targets.wheel]
packages = ["mimzy"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
