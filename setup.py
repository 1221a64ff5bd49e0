from setuptools import setup, find_packages

setup(
    name="featrack",
    version="0.1.0",
    description="Keypoint detection with greedy NMS and ratio-test descriptor matching",
    author="featrack contributors",
    packages=find_packages(include=["featrack", "featrack.*"]),
    install_requires=[
        "opencv-contrib-python>=4.8.0,<5",
        "numpy>=1.24.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.9",
)
