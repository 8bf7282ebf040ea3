from os import path

from setuptools import setup, find_packages

import mocha.scripts.version as version

here = path.abspath(path.dirname(__file__))

with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='mocha',
    description='Installer that fetches, cross compiles and installs packages from their manifests',
    long_description=long_description,
    version=version.version,
    packages=find_packages(exclude=['tests']),
    include_package_data=True,
    install_requires=[
        'click>=8.0',
        'humanfriendly',
        'rainbow_logging_handler',
        'pyyaml'
    ],
    tests_require=['pytest'],
    extras_require={
        'test': ['pytest']
    },
    platforms='linux',
    classifiers=[
        "Programming Language :: Python :: 3 :: Only",
        "Operating System :: POSIX :: Linux",
        "Topic :: System :: Installation/Setup",
        "Topic :: Software Development :: Build Tools",
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        'Intended Audience :: Developers',
    ],
    entry_points='''
        [console_scripts]
        mocha=mocha.scripts.cli:cli_with_error_catching
    '''
)
