from setuptools import setup, find_packages
import os

install_requires = ["lark>=1.1", "pydantic>=2.0"]

# Define optional dependencies for development
extras_require = {"dev": ["pytest"]}

setup(
    name="rprune",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "rprune = rprune.cli:main",
        ],
    },
    include_package_data=True,
    package_data={"rprune.parser": ["rlang.lark"]},
    description="A dead code elimination pass for R scripts.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
