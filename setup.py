import io
import re

from setuptools import find_packages, setup

__version__ = re.search(
    r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
    io.open("src/tracedispatch/version.py", encoding="utf_8_sig").read(),
).group(1)


setup(
    name="tracedispatch",
    version=__version__,
    description="tracedispatch replays job traces against resource pools, one sized request per job.",
    long_description="""tracedispatch replays job traces against resource pools, one sized request per job.""",
    author="",
    author_email="",
    package_dir={"": "src"},
    packages=find_packages("src"),
    zip_safe=False,
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "randomname",
        "numpy",
        "pydantic>=2",
        "sortedcontainers",
        "typing_extensions",
        "fire",
    ],
    extras_require={
        "tests": ["pytest"],
    },
)
