"""
Packaging for obd-serial-connection.

Tests live beside the modules they test, in *_test.py files. Install with the test extra and run pytest:

    pip install -e .[test]
    pytest src
"""

from setuptools import setup

setup(
    name='obd-serial-connection',
    version='0.1.0',
    description='Opens and configures serial connections to OBD adapters.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    package_dir={'': 'src'},
    packages=['obdserial', 'obdserial.config', 'obdserial.support'],
    package_data={'obdserial.config': ['*.cfg']},
    python_requires='>=3.8',
    install_requires=[
        'pyserial>=3.4',
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': [
            'PyHamcrest>=2.0',
            'pytest',
            'timeout-decorator',
        ]
    },
    zip_safe=False,
)
