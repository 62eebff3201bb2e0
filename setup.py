# /edgefinder/setup.py
from setuptools import setup, find_namespace_packages

with open("requirements.txt") as f:
    required = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="edgefinder",
    version="0.1.0",
    description="Value-bet detection: EV, capped half-Kelly staking and bankroll backtests.",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["edgefinder*"]),
    python_requires=">=3.10",
    install_requires=required,
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["edgefinder=edgefinder.cli:main"]},
    classifiers=[
        "Programming Language :: Python :: 3.11",
        "Operating System :: OS Independent",
        "Intended Audience :: Developers",
        "Topic :: Scientific/Engineering :: Information Analysis",
    ],
)
