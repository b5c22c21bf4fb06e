[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gruber"
version = "0.1.0"
description = "Touchscreen dashboard showing the hourly weather forecast and upcoming transit departures"
requires-python = ">=3.10"
dependencies = []
keywords = ["dashboard", "touchscreen", "weather", "transit", "raspberry-pi", "tkinter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gruber = "gruber.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gruber"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
