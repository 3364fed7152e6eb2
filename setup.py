from setuptools import setup, find_packages

setup(
    name='npm-buttons',
    version='0.1',
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.8',
    description='Launch and stop package scripts from persistent buttons that stay in sync with the real run state',
    install_requires=[
        'prompt_toolkit>=3.0.32',
    ],
    extras_require={
        'test': [
            'pytest>=7',
            'pytest-asyncio>=0.21',
        ],
    },
    entry_points={
        'console_scripts': [
            'npm-buttons=npm_buttons.__main__:main',
        ],
    },
)
