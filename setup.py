from setuptools import setup, find_packages

setup(
    name="subtitle-bridge",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "langdetect>=1.0.9",
    ],
    extras_require={
        'test': [
            'pytest>=6.0',
            'pysubs2>=1.8.0',
        ],
        'dev': [
            'pytest>=6.0',
            'pysubs2>=1.8.0',
            'black>=21.0',
            'isort>=5.0',
            'mypy>=0.900',
        ],
    },
    entry_points={
        'console_scripts': [
            'subtitle-bridge=subtitle_bridge.cli.main:main',
        ],
    },
    python_requires='>=3.8',
)
