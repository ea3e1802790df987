from setuptools import setup, find_packages

setup(
    name="km_tools",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        # Progress reporting
        "tqdm>=4.62.0",

        # System monitoring and utilities
        "psutil>=5.9.0",
    ],
    extras_require={
        'dev': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'km-tools=km_tools.cli.main_cli:main',
            'km-basic-filter=km_tools.cli.filter_cli:main',
        ],
    },
    description="Streaming presence/absence filter for k-mer abundance matrices",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Intended Audience :: Science/Research",
    ],
    python_requires=">=3.7",
)
