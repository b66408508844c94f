"""Install the movies API service."""

from setuptools import setup, find_packages

setup(
    name='movies-api',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        "flask",
        "flask-cors",
        "pyjwt[crypto]>=2.10",
        "pytz",
        "python-json-logger",
        "retry",
        "click",
    ],
    extras_require={
        'test': [
            "pytest",
            "jsonschema",
            "cryptography",
        ],
    },
    entry_points={
        'console_scripts': [
            'movies-token=movies.generate_token:generate_token',
        ],
    },
    zip_safe=False
)
