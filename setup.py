from pathlib import Path

from setuptools import find_packages, setup

NAME = "einvoice-cii"
VERSION = "0.1.0"
DESCRIPTION = "ZUGFeRD 1-3 and XRechnung Cross Industry Invoice (CII) XML serialiser"

README_FILE = Path("SPEC_FULL.md")
LONG_DESCRIPTION = README_FILE.read_text(encoding="utf-8") if README_FILE.exists() else ""

INSTALL_REQUIRES = [
    "lxml>=4.9",
    "openpyxl>=3.1",
]

EXTRAS_REQUIRE = {
    "test": ["pytest>=7"],
}


setup(
    name=NAME,
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,
    entry_points={
        "console_scripts": [
            "einvoice-cii=einvoice_cii.cli:main",
        ],
    },
)
