from setuptools import find_packages, setup

setup(
    name="org-config",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Load and validate a directory tree describing the teams, "
                "repositories and rulesets of a GitHub organization.",

    packages=find_packages(include=("org_config", "org_config.*"),
                           exclude=("org_config.test", "org_config.test.*")),

    install_requires=[
        "Click>=8.0,<9.0",
        "pydantic>=2.6,<3.0",
        "pydantic-settings>=2.0,<3.0",
        "python-json-logger>=3.1",
        "ruamel.yaml>=0.17.21,<0.19.0",
    ],

    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },

    test_suite="org_config.test",

    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
    entry_points={
        'console_scripts': [
            'org-config = org_config.cli:root',
        ],
    },
)
