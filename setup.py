"""
Setup configuration for the lds_driver library.

Receive-only driver for the HLS-LFCD LDS-01 laser rangefinder.
Pure Python on top of pyserial and numpy.
It can be installed via:
    - pip install .
    - pip install -e .  (for development)
"""

from setuptools import setup, find_packages

setup(
    name='lds-driver',
    version='0.1.0',
    packages=find_packages(include=['lds_driver', 'lds_driver.*']),

    install_requires=[
        'setuptools',
        'numpy>=1.21.0',
        'pyserial>=3.5',
        'pyserial-asyncio>=0.6',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov',
            'pytest-timeout',
        ],
    },

    zip_safe=True,

    maintainer='Eyas Taifour',
    maintainer_email='etaifour@me.com',
    description='Python driver for the ROBOTIS HLS-LFCD LDS-01 2D laser rangefinder',
    long_description=open('README.md').read() if __import__('os').path.exists('README.md') else '',
    long_description_content_type='text/markdown',
    license='MIT',

    tests_require=['pytest'],

    # CLI tools
    entry_points={
        'console_scripts': [
            'lds-read = lds_driver.__main__:main',
        ],
    },

    python_requires='>=3.8',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Scientific/Engineering :: Robotics',
    ],
)
