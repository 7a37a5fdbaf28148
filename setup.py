import setuptools

setuptools.setup(
    name="artdice",
    version="0.1.0",
    classifiers=["Programming Language :: Python :: 3"],
    python_requires=">=3.8",
    packages=setuptools.find_namespace_packages(include=["artdice", "artdice.*"]),
    package_data={"artdice": ["roll.lark", "settings.default.yaml"]},
    entry_points={"console_scripts": ["artdice=artdice.__main__:main"]},
    install_requires=["lark", "pyyaml", "plotly", "kaleido", "pandas"],
    extras_require={"test": ["pytest"]},
)
