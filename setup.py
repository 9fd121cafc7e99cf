# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="zipwalk",
    version="1.0.0",
    description="Walk, stat and open files nested inside ZIP archives to any depth",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["zipwalk", "zipwalk.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'zipwalk=zipwalk.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
