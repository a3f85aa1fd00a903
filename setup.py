# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treemason",
    version="1.0.0",
    description="Create directory hierarchies from indented outlines or YAML descriptions",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treemason*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",  # YAML structure descriptions
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        'console_scripts': [
            'treemason=treemason.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
