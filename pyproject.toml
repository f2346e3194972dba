[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "emgpong"
version = "0.1.0"
description = "Pong steered by UDP control values, with ADS1015/ADS1115 register logic and high-pass signal processing"
requires-python = ">=3.10"
keywords = ["pong", "emg", "ads1115", "udp", "butterworth", "signal processing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
emgpong = "emgpong.app:main"
emgpong-send = "emgpong.udp:send_main"
emgpong-receive = "emgpong.udp:receive_main"

[tool.hatch.build.targets.wheel]
packages = ["emgpong"]

[tool.pytest.ini_options]
addopts = "-ra"
