from pathlib import Path
from setuptools import setup, find_packages


def get_long_description():
    readme_path = Path(__file__).parent / "README.md"
    if readme_path.exists():
        return readme_path.read_text(encoding="utf-8")
    return "CTRV-UKF: Unscented Kalman Filter for laser/radar fusion"


setup(
    name="ctrv-ukf",
    version="1.0.0",
    author="CTRV-UKF Contributors",
    description="Unscented Kalman Filter fusing position and range/bearing/range-rate sensors with a CTRV motion model",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(where="python"),
    package_dir={"": "python"},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.7.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "pytest-cov>=4.0.0", "black", "flake8"],
    },
    keywords=["kalman-filter", "ukf", "sensor-fusion", "ctrv", "radar", "lidar", "tracking"],
)
