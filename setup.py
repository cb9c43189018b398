import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="appspider-enterprise",
    version="0.1.0",
    author="team-504",
    author_email="example@gmail.com",
    description="AppSpider Enterprise REST API client",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=setuptools.find_namespace_packages(include=["appspider", "appspider.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.25",
        "urllib3>=1.26",
        "click>=8.0",
        "rich>=12.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "responses>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "appspider=appspider.enterprise.cli.runner:cli",
        ],
    },
)
