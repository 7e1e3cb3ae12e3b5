"""Install the Chronicle service."""

from setuptools import setup, find_packages

setup(
    name='chronicle',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    package_data={'chronicle': ['config.py']},
    python_requires='>=3.9',
    install_requires=[
        "flask>=2.3",
        "flask-sqlalchemy>=3.0",
        "sqlalchemy>=2.0",
        "werkzeug>=2.3",
        "pyjwt>=2.0",
        "python-dateutil",
        "pytz",
        "python-json-logger",
        "click",
    ],
    extras_require={
        'test': [
            "pytest",
        ],
    },
    zip_safe=False
)
