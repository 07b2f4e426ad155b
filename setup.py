""" ecrecovery build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import ecrecovery

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=ecrecovery.name,
    version=ecrecovery.__version__,
    license=ecrecovery.__license__,
    author=ecrecovery.__author__,
    author_email=ecrecovery.__author_email__,
    description="ECDSA public key recovery (SEC 1 v.2 section 4.1.6)",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=["dataclasses-json", "ecdsa>=0.18"],
    extras_require={"tests": ["pytest", "cryptography"]},
    keywords=(
        "cryptography elliptic-curves ecdsa public-key-recovery "
        "secp256r1 prime256v1 P-256 SEC1"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
