from setuptools import setup, find_packages

setup(
    name="uos_decoder",
    version="0.1.0",
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'uos-decoder=uos_decoder.__main__:main'
        ],
    },
    install_requires=[
        'PyQt5>=5.15',
        'scalecodec>=1.2,<2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
)
