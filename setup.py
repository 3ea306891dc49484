import setuptools
from pathlib import Path

with Path("README.md").open(encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="forcebubbles",
    version="0.1.0",
    author="ForceBubbles contributors",
    description="Animated force-directed bubble charts of per-entity yearly time series",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "pandas>=1.3.0",
        "numpy>=1.20.0",
        "matplotlib>=3.3.0",
        "pillow>=8.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    packages=setuptools.find_packages(),
    package_data={
        'forcebubbles': ['data/*.csv'],
    },
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "forcebubbles=forcebubbles.__main__:main",
        ],
    },
    python_requires=">=3.8",
)
