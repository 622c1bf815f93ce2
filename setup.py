import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name='pointmap',
    version='1.0.0',
    packages=setuptools.find_packages(exclude=['tests']),
    scripts=['bin/pointmap'],
    license='Apache 2.0',
    author="Virginia Tech",
    description="Planar interpolation between non-matching point sets " +
        "and time-series bracketing.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=["Interpolation", "Triangulation", "Boundary Data"],
    install_requires=[
        'numpy',
        'scipy',
        'matplotlib',
        'pyyaml',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3.8',
    ],
)
