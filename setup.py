from setuptools import setup, find_packages

setup(
    name='factscorer',
    version='0.1.0',
    packages=find_packages(include=['factscorer', 'factscorer.*']),
    description='Scoring of patient-reported-outcome questionnaires (FACT-G, FACT-BMT) from item responses.',
    install_requires=[
        'numpy',
        'pandas',
        'tqdm',
    ],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.8',
)
