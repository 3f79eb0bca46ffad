# setup.py
from setuptools import setup, find_packages

setup(
    name="resilient",
    version="0.1.0",
    packages=find_packages(include=["resilient", "resilient.*", "resilient_lsp", "resilient_lsp.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["resilient-ls=resilient_lsp.server:main"],
    },
    zip_safe=False,
)
