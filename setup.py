"""
Setup file.
"""

import os

from setuptools import find_packages, setup

KEYWORDS = "ffmpeg build static-library bindgen bindings vendored native"
HERE = os.path.dirname(os.path.abspath(__file__))


def get_version() -> str:
    with open(os.path.join(HERE, "src", "avbuild", "__init__.py"), encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=", 1)[1].strip().strip('"')
    raise RuntimeError("Unable to find __version__")


if __name__ == "__main__":
    setup(
        name="avbuild",
        version=get_version(),
        description="Builds vendored FFmpeg static libraries and bindings for a consuming build system",
        keywords=KEYWORDS,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["avbuild = avbuild.cli:main"]},
        include_package_data=True)
