"""
Setup script for Workout Map
Run: pip install -e .[test]
Tests: pytest  (or: python -m unittest discover -s tests -t . -p "*_tests.py")
"""

from setuptools import setup

setup(
    name='workout-map',
    version='1.0.0',
    description='Log running and cycling workouts on a map',
    python_requires='>=3.9',
    py_modules=['app', 'constants', 'db', 'errors', 'models'],
    packages=['core', 'components'],
    install_requires=[
        'nicegui>=1.4,<3',
        'pandas',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': ['workout-map=app:main'],
    },
)
