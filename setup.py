from setuptools import setup, find_packages

setup(
    name="kill-zen-all",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pyperclip",
        "watchdog>=2.1",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "kill-zen-all=kill_zen_all.__main__:main",
        ],
    },
)
